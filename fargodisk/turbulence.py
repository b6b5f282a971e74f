"""Stochastic turbulent forcing of the disk potential by wave-like modes.

Each mode has an azimuthal wavenumber, a radial centre, a phase and an
amplitude drawn at random; it lives for a finite time and is redrawn once
that time has elapsed.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from .grid import Mesh, PolarGrid
from .params import Parameters


@dataclass(eq=False)
class TurbulentForcing:
    """A set of stochastic modes added to the gravitational potential felt by the disk."""

    params: Parameters
    mesh: Mesh
    rng: np.random.Generator = field(default_factory=np.random.default_rng)
    m: np.ndarray = field(init=False)
    rc: np.ndarray = field(init=False)
    phic: np.ndarray = field(init=False)
    xi: np.ndarray = field(init=False)
    omegac: np.ndarray = field(init=False)
    sigma: np.ndarray = field(init=False)
    deltat: np.ndarray = field(init=False)
    t0: np.ndarray = field(init=False)
    tf: np.ndarray = field(init=False)

    def __post_init__(self) -> None:
        count = int(self.params["NBTURBMODES"])
        if count < 0:
            raise ValueError("the number of turbulent modes cannot be negative")
        if self.mesh.nsec < 8:
            raise ValueError("at least 8 sectors are needed to draw turbulent modes")
        self.m = np.zeros(count, dtype=np.int64)
        for name in ("rc", "phic", "xi", "omegac", "sigma", "deltat", "t0"):
            setattr(self, name, np.zeros(count))
        # Every mode is drawn on the first call.
        self.tf = np.full(count, -np.inf)

    def _gaussian(self) -> float:
        while True:
            x1 = 2.0 * self.rng.random() - 1.0
            x2 = 2.0 * self.rng.random() - 1.0
            w = x1 * x1 + x2 * x2
            if 0.0 < w < 1.0:
                return x1 * math.sqrt(-2.0 * math.log(w) / w)

    def _draw(self, k: int) -> None:
        p = self.params
        self.m[k] = int(math.exp(math.log(self.mesh.nsec / 8.0) * self.rng.random()))
        self.rc[k] = p["TURBRMIN"] + (p["TURBRMAX"] - p["TURBRMIN"]) * self.rng.random()
        self.phic[k] = (p["PMAX"] - p["PMIN"]) * self.rng.random()
        self.xi[k] = self._gaussian()

    def _ring_gamma(self) -> np.ndarray:
        p = self.params
        gamma, ratio = p["GAMMATURB"], p["CAVITYRATIO"]
        rmin = p["CAVITYRADIUS"] - p["CAVITYWIDTH"] * p["ASPECTRATIO"]
        rmax = p["CAVITYRADIUS"] + p["CAVITYWIDTH"] * p["ASPECTRATIO"]
        r = self.mesh.rmed
        with np.errstate(divide="ignore", invalid="ignore"):
            ramp = gamma * np.exp((rmax - r) / (rmax - rmin) * np.log(ratio))
        return np.where(r < rmin, gamma * ratio, np.where(r <= rmax, ramp, gamma))

    def apply(
        self,
        potential: PolarGrid | np.ndarray,
        physical_time: float,
        omega_frame: float = 0.0,
    ) -> np.ndarray:
        """Add the turbulent potential at ``physical_time`` to ``potential`` in place.

        Modes whose lifetime has ended are redrawn first. The turbulent
        potential that was added is returned.
        """
        nr, ns = self.mesh.nrad, self.mesh.nsec
        if isinstance(potential, PolarGrid):
            pot = potential.data
        else:
            pot = potential
            if not isinstance(pot, np.ndarray) or pot.dtype != np.float64:
                raise TypeError("potential must be a float64 array to be updated in place")
        if pot.ndim != 2 or pot.shape[0] < nr or pot.shape[1] != ns:
            raise ValueError(f"potential must have at least {nr} rings of {ns} sectors")

        p = self.params
        expired = np.flatnonzero(physical_time >= self.tf)
        for k in expired:
            self._draw(int(k))
        if expired.size:
            rc, m = self.rc[expired], self.m[expired].astype(float)
            self.omegac[expired] = rc**-1.5
            self.sigma[expired] = math.pi * rc / 4.0 / m
            self.deltat[expired] = (
                p["LSAMODESPEEDUP"] * 2.0 * math.pi * rc / m / p["ASPECTRATIO"]
                / rc ** (-0.5 + p["FLARINGINDEX"])
            )
            self.t0[expired] = physical_time
            self.tf[expired] = physical_time + self.deltat[expired]

        ttilde = physical_time - self.t0
        r = self.mesh.rmed
        gamma = self._ring_gamma()
        azimuth = self.mesh.azimuth
        high_cutoff = p.flag("HIGHMCUTOFF")
        turb = np.zeros((nr, ns))
        for k in range(self.m.size):
            if high_cutoff and self.m[k] > 6:
                continue
            ampl = (
                gamma / r * self.xi[k]
                * np.exp(-((r - self.rc[k]) ** 2) / self.sigma[k] ** 2)
                * math.sin(math.pi * ttilde[k] / self.deltat[k])
            )
            wave = np.cos(
                self.m[k] * azimuth - self.phic[k] - (self.omegac[k] - omega_frame) * ttilde[k]
            )
            turb += ampl[:, None] * wave[None, :]
        pot[:nr] += turb
        return turb