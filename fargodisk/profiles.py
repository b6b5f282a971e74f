"""Initial radial profiles of the disk: surface density, energy, viscosity, aspect ratio."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from .grid import Mesh, PolarGrid, make_1d_profile
from .params import MU, R, Parameters


@dataclass(eq=False)
class DiskModel:
    """Radial disk profiles defined by the run parameters and a few run switches."""

    params: Parameters
    mesh: Mesh
    scaling_factor: float = 1.0
    physical_time: float = 0.0
    physical_time_initial: float = 0.0
    tail_off_gauss: bool = False
    tail_off_in: bool = False
    exponential_cutoff: bool = False
    tail_off_aurelien: bool = False
    tail_off_stype: bool = False
    tail_off_gi: bool = False
    cavity_torque: bool = False
    restart_with_new_dust: bool = False
    viscosity_alpha: bool | None = None
    dust_viscosity_alpha: bool | None = None
    sound_speed: np.ndarray | None = None
    dust_sound_speed: np.ndarray | None = None
    sigma_med: np.ndarray | None = field(default=None, init=False)
    sigma_inf: np.ndarray | None = field(default=None, init=False)
    dust_sigma_med: np.ndarray | None = field(default=None, init=False)
    dust_sigma_inf: np.ndarray | None = field(default=None, init=False)
    energy_med: np.ndarray | None = field(default=None, init=False)
    presc_time_med: np.ndarray | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        if self.viscosity_alpha is None:
            self.viscosity_alpha = self.params["ALPHAVISCOSITY"] != 0.0
        if self.dust_viscosity_alpha is None:
            self.dust_viscosity_alpha = self.params["DALPHAVISCOSITY"] != 0.0

    # ------------------------------------------------------------------ density
    def sigma(self, r: float) -> float:
        """Gas surface density at radius ``r``."""
        p = self.params
        cavity = 1.0 / p["CAVITYRATIO"] if r < p["CAVITYRADIUS"] else 1.0
        value = cavity * self.scaling_factor * p["SIGMA0"] * math.pow(r, -p["SIGMASLOPE"])
        if self.tail_off_gauss:
            value = (
                p["SIGMA0"] * math.exp(-0.5 * (r - 1.0) ** 2 * math.pow(2.0 * p["ASPECTRATIO"], -2.0))
                + p["DENSITYJUMP"] * p["SIGMA0"]
            )
        if self.tail_off_in and r < 1.4:
            value *= (r - self.mesh.rmed[0] + 0.1) ** 2
        cut = r * p["FACTORUNITLENGTH"] / p["CUTDIST"]
        if self.exponential_cutoff:
            value *= math.exp(-math.pow(cut, p["EXPONENTIALCUTOFFINDEX"]))
        if self.tail_off_aurelien:
            value *= math.exp(-math.pow(r / 4.0, 8.0)) * math.exp(-math.pow(r / 1.5, -1.1))
        if self.tail_off_stype:
            value *= math.exp(-math.pow(cut, p["EXPONENTIALCUTOFFINDEX"]))
            value *= math.exp(-math.pow(r, -1.5))
        if self.tail_off_gi:
            value *= math.exp(-math.pow(r / 3.3, 8.0)) * math.exp(-math.pow(r / 1.6, -1.1))
        if self.cavity_torque:
            fint, fext = p["FRACINT"], p["FRACEXT"]
            vr_over_cs = 0.5 * (fint + fext) + 0.5 * (fint - fext) * math.tanh(
                (p["CAVITYRADIUS"] - r) / p["CAVITYWIDTH"]
            )
            value = (
                p["SIGMA0"]
                * (fext / vr_over_cs)
                * math.pow(self.mesh.rmed[-1] / r, 0.5 + p["FLARINGINDEX"])
            )
        return value

    def dust_sigma(self, r: float) -> float:
        """Dust surface density at radius ``r``."""
        p = self.params
        value = self.sigma(r) * p["DUSTTOGASDENSITYRATIO"]
        if self.restart_with_new_dust:
            rmin, rmax = p["RMINDUST"], p["RMAXDUST"]
            d0, slope, flaring = p["DSIGMA0"], p["DSIGMASLOPE"], p["DFLARINGINDEX"]

            def edge(r0: float) -> float:
                width = 5.0 * self.dust_aspect_ratio(r0) * math.pow(r0, 1.0 + flaring)
                return d0 * math.pow(r0, -slope) * math.exp(
                    -0.5 * (r - r0) ** 2 * math.pow(width, -2.0)
                )

            if rmin <= r <= rmax:
                value = d0 * math.pow(r, -slope)
            else:
                if r < rmin:
                    value = edge(rmin)
                if r > rmin:
                    value = edge(rmax)
            value += p["DENSITYFLOOR"]
        return value

    # ------------------------------------------------------------------- energy
    def energy(self, r: float) -> float:
        """Gas internal energy at radius ``r``."""
        p = self.params
        gamma = p["ADIABATICINDEX"]
        if gamma == 1.0:
            raise ValueError(
                "the adiabatic index must differ from unity to initialize the gas internal energy"
            )
        energy0 = (
            R / MU / (gamma - 1.0)
            * self.sigma(r)
            * p["ASPECTRATIO"] ** 2
            * math.pow(r, -1.0 + 2.0 * p["FLARINGINDEX"])
        )
        cavity = 1.0 / p["CAVITYRATIO"] if r < p["CAVITYRADIUS"] else 1.0
        return cavity * self.scaling_factor * energy0

    def presc_time(self, r: float) -> float:
        """Temperature prescription time at radius ``r``."""
        p = self.params
        return p["PRESCTIME0"] * math.pow(r, 2.0 + 2.0 * p["FLARINGINDEX"])

    def beta_cooling(self, r: float) -> float:
        """Beta cooling time at radius ``r``."""
        p = self.params
        return p["BETACOOLINGTIME"] * math.pow(r, -p["BETACOOLINGSLOPE"])

    # ---------------------------------------------------------------- viscosity
    def _time_scale(self) -> float:
        return 1.0 + (self.physical_time - self.physical_time_initial) * self.params["LAMBDADOUBLING"]

    @staticmethod
    def _jump(value: float, r: float, rmin: float, rmax: float, ratio: float) -> float:
        if r < rmin:
            value *= ratio
        if rmin <= r <= rmax:
            value *= math.exp((rmax - r) / (rmax - rmin) * math.log(ratio))
        return value

    def _alpha_base(self, r: float, alpha: float, speed: np.ndarray | None) -> float:
        if speed is None:
            raise ValueError("an axisymmetric sound speed profile is required for alpha viscosity")
        speed = np.asarray(speed, dtype=float)
        index = min(int(np.searchsorted(self.mesh.rmed, r, side="left")), speed.size - 1)
        return alpha * speed[index] ** 2 * math.pow(r, 1.5)

    def _release(self, base: float) -> float:
        p = self.params
        if self.physical_time < p["RELEASEDATEVISCOSITY"]:
            nudot = (p["RELEASEVISCOSITY"] - base) / (
                p["RELEASEDATEVISCOSITY"] - self.physical_time_initial
            )
            return base + nudot * self.physical_time
        return p["RELEASEVISCOSITY"]

    def viscosity(self, r: float) -> float:
        """Kinematic gas viscosity at radius ``r``."""
        p = self.params
        value = p["VISCOSITY"]
        if self.viscosity_alpha:
            value = self._alpha_base(r, p["ALPHAVISCOSITY"], self.sound_speed)
        half = p["CAVITYWIDTH"] * p["ASPECTRATIO"] * math.pow(p["CAVITYRADIUS"], 1.0 + p["FLARINGINDEX"])
        scale = self._time_scale()
        rmin = (p["CAVITYRADIUS"] - half) * scale
        rmax = (p["CAVITYRADIUS"] + half) * scale
        value = self._jump(value, r, rmin, rmax, p["CAVITYRATIO"])
        if not self.viscosity_alpha and p["RELEASEDATEVISCOSITY"] > 1e-3:
            value = self._release(p["VISCOSITY"])
        return value

    def dust_viscosity(self, r: float) -> float:
        """Kinematic dust viscosity at radius ``r``."""
        p = self.params
        value = p["DVISCOSITY"]
        if self.dust_viscosity_alpha:
            value = self._alpha_base(r, p["DALPHAVISCOSITY"], self.dust_sound_speed)
        half = p["CAVITYWIDTH"] * p["DASPECTRATIO"]
        scale = self._time_scale()
        rmin = (p["CAVITYRADIUS"] - half) * scale
        rmax = (p["CAVITYRADIUS"] + half) * scale
        value = self._jump(value, r, rmin, rmax, p["CAVITYRATIO"])
        if p["RELEASEDATEVISCOSITY"] > 1e-3:
            value = self._release(p["DVISCOSITY"])
        return value

    def _aspect(self, base: float, r: float) -> float:
        p = self.params
        scale = self._time_scale()
        rmin = (p["TRANSITIONRADIUS"] - p["TRANSITIONWIDTH"] * base) * scale
        rmax = (p["TRANSITIONRADIUS"] + p["TRANSITIONWIDTH"] * base) * scale
        return self._jump(base, r, rmin, rmax, p["TRANSITIONRATIO"])

    def aspect_ratio(self, r: float) -> float:
        """Gas aspect ratio at ``r`` (without the flaring factor)."""
        return self._aspect(self.params["ASPECTRATIO"], r)

    def dust_aspect_ratio(self, r: float) -> float:
        """Dust aspect ratio at ``r`` (without the flaring factor)."""
        return self._aspect(self.params["DASPECTRATIO"], r)

    # --------------------------------------------------------------- tabulation
    def _tabulate(self, func, radii: np.ndarray) -> np.ndarray:
        return np.array([func(float(r)) for r in radii])

    def fill_sigma(self) -> tuple[np.ndarray, np.ndarray]:
        """Tabulate gas surface density at ring centres and inner edges."""
        self.sigma_med = self._tabulate(self.sigma, self.mesh.rmed)
        self.sigma_inf = self._tabulate(self.sigma, self.mesh.rinf)
        return self.sigma_med, self.sigma_inf

    def fill_dust_sigma(self) -> tuple[np.ndarray, np.ndarray]:
        """Tabulate dust surface density at ring centres and inner edges."""
        self.dust_sigma_med = self._tabulate(self.dust_sigma, self.mesh.rmed)
        self.dust_sigma_inf = self._tabulate(self.dust_sigma, self.mesh.rinf)
        return self.dust_sigma_med, self.dust_sigma_inf

    def fill_energy(self) -> np.ndarray:
        """Tabulate internal energy at ring centres."""
        self.energy_med = self._tabulate(self.energy, self.mesh.rmed)
        return self.energy_med

    def fill_presc_time(self) -> np.ndarray:
        """Tabulate temperature prescription time at ring centres."""
        self.presc_time_med = self._tabulate(self.presc_time, self.mesh.rmed)
        return self.presc_time_med


def refill_sigma(field: PolarGrid | np.ndarray, mesh: Mesh) -> tuple[np.ndarray, np.ndarray]:
    """Azimuthally averaged density at ring centres, and its interpolation to inner edges."""
    med = make_1d_profile(field)
    if med.size != mesh.nrad:
        raise ValueError("field and mesh have different numbers of rings")
    inf = np.empty_like(med)
    inf[0] = med[0]
    rmed, rinf = mesh.rmed, mesh.rinf
    inf[1:] = (med[:-1] * (rmed[1:] - rinf[1:]) + med[1:] * (rinf[1:] - rmed[:-1])) / (
        rmed[1:] - rmed[:-1]
    )
    return med, inf


def refill_energy(field: PolarGrid | np.ndarray) -> np.ndarray:
    """Azimuthally averaged energy, one value per ring."""
    return make_1d_profile(field)