"""Transport substep of a hydrodynamical time step, with the FARGO azimuthal shift.

Quantities are advected with a second-order upwind (van Leer) scheme,
first radially, then azimuthally. The azimuthal step removes the
ring-averaged orbital motion as a whole-cell shift and only advects the
residual velocity. Momenta are carried as left/right, radial/angular,
zone-centred quantities and turned back into velocities at the end.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from .grid import Mesh, PolarGrid

_TINY = 1e-20


def _view(values: PolarGrid | np.ndarray, rows: int, nsec: int, what: str,
          writable: bool = False) -> np.ndarray:
    """Return the first ``rows`` rings of a field, checking its shape."""
    if isinstance(values, PolarGrid):
        array = values.data
    elif writable:
        array = values
        if not isinstance(array, np.ndarray) or array.dtype != np.float64:
            raise TypeError(f"{what} must be a float64 array to be updated in place")
    else:
        array = np.asarray(values, dtype=float)
    if array.ndim != 2 or array.shape[0] < rows or array.shape[1] != nsec:
        raise ValueError(f"{what} must have at least {rows} rings of {nsec} sectors")
    return array[:rows]


def compute_star_rad(qbase: PolarGrid | np.ndarray, vrad: PolarGrid | np.ndarray,
                     mesh: Mesh, dt: float) -> np.ndarray:
    """Upwind, slope-limited values of ``qbase`` at the inner edge of each ring.

    The result has ``nrad + 1`` rings; the innermost and outermost edges are zero.
    """
    nr, ns = mesh.nrad, mesh.nsec
    qb = _view(qbase, nr, ns, "qbase")
    vr = _view(vrad, nr, ns, "vrad")
    idr = mesh.inv_diff_rmed
    dq = np.zeros((nr, ns))
    if nr > 2:
        dqm = (qb[1:-1] - qb[:-2]) * idr[1:-1, None]
        dqp = (qb[2:] - qb[1:-1]) * idr[2:, None]
        with np.errstate(divide="ignore", invalid="ignore"):
            harmonic = 2.0 * dqp * dqm / (dqp + dqm)
        dq[1:-1] = np.where(dqp * dqm > 0.0, harmonic, 0.0)
    qs = np.zeros((nr + 1, ns))
    if nr > 1:
        rmed = mesh.rmed
        shift = vr[1:nr] * dt
        # The slope of the outermost ring is zero, so its outer spacing never matters.
        rnext = np.append(rmed[2:], rmed[-1])
        upwind = qb[:-1] + ((rmed[1:] - rmed[:-1])[:, None] - shift) * 0.5 * dq[:-1]
        downwind = qb[1:] - ((rnext - rmed[1:])[:, None] + shift) * 0.5 * dq[1:]
        qs[1:nr] = np.where(vr[1:nr] > 0.0, upwind, downwind)
    return qs


def compute_star_theta(qbase: PolarGrid | np.ndarray, vtheta: PolarGrid | np.ndarray,
                       mesh: Mesh, dt: float) -> np.ndarray:
    """Upwind, slope-limited values of ``qbase`` at the lower azimuthal edge of each cell."""
    nr, ns = mesh.nrad, mesh.nsec
    qb = _view(qbase, nr, ns, "qbase")
    vt = _view(vtheta, nr, ns, "vtheta")
    dxtheta = (mesh.dphi * mesh.rmed)[:, None]
    qb_jm = np.roll(qb, 1, axis=1)
    dqm = qb - qb_jm
    dqp = np.roll(qb, -1, axis=1) - qb
    with np.errstate(divide="ignore", invalid="ignore"):
        harmonic = dqp * dqm / (dqp + dqm) / dxtheta
    dq = np.where(dqp * dqm > 0.0, harmonic, 0.0)
    ksi = vt * dt
    upwind = qb_jm + (dxtheta - ksi) * np.roll(dq, 1, axis=1)
    downwind = qb - (dxtheta + ksi) * dq
    return np.where(ksi > 0.0, upwind, downwind)


def advect_shift(field: PolarGrid | np.ndarray, shifts: Sequence[int] | np.ndarray) -> None:
    """Rotate each ring ``i`` of ``field`` by ``shifts[i]`` sectors, in place."""
    offsets = np.asarray(shifts, dtype=np.int64)
    if isinstance(field, PolarGrid):
        if offsets.ndim != 1 or offsets.size > field.nrad:
            raise ValueError("one shift per ring is required")
        values = field.data[: offsets.size]
    else:
        if not isinstance(field, np.ndarray) or field.ndim != 2:
            raise TypeError("field must be a 2-D array")
        if offsets.ndim != 1 or offsets.size > field.shape[0]:
            raise ValueError("one shift per ring is required")
        values = field[: offsets.size]
    ns = values.shape[1]
    index = (np.arange(ns)[None, :] - offsets[:, None]) % ns
    values[:] = np.take_along_axis(values, index, axis=1)


@dataclass(eq=False)
class Transport:
    """Advection of density, momenta and optional energy and label over one time step."""

    mesh: Mesh
    omega_frame: float = 0.0
    fast: bool = True
    energy_equation: bool = False
    advect_label: bool = False
    short_friction_time: bool = False
    open_inner: bool = False
    lost_mass: float = field(default=0.0, init=False)
    lost_mass_dust: float = field(default=0.0, init=False)
    acc_rate_dust: float = field(default=0.0, init=False)
    vmed: np.ndarray = field(init=False)
    shifts: np.ndarray = field(init=False)
    no_split: np.ndarray = field(init=False)

    def __post_init__(self) -> None:
        nr = self.mesh.nrad
        self.vmed = np.zeros(nr)
        self.shifts = np.zeros(nr, dtype=np.int64)
        self.no_split = np.zeros(nr, dtype=bool)

    # ----------------------------------------------------------- momenta
    def _momenta(self, rho: np.ndarray, vr: np.ndarray, vt: np.ndarray) -> list[np.ndarray]:
        nr = self.mesh.nrad
        rmed = self.mesh.rmed[:, None]
        om = self.omega_frame
        return [
            rho * vr[1 : nr + 1],
            rho * vr[:nr],
            rho * (np.roll(vt, -1, axis=1) + rmed * om) * rmed,
            rho * (vt + rmed * om) * rmed,
        ]

    def _velocities(self, rho: np.ndarray, vr: np.ndarray, vt: np.ndarray,
                    momenta: list[np.ndarray]) -> None:
        nr = self.mesh.nrad
        rmed = self.mesh.rmed[:, None]
        rp, rm, tp, tm = momenta
        vr[0] = 0.0
        vr[1:nr] = (rp[:-1] + rm[1:]) / (rho[1:] + rho[:-1] + _TINY)
        vt[:] = (
            (np.roll(tp, 1, axis=1) + tm) / (rho + np.roll(rho, 1, axis=1) + _TINY) / rmed
            - rmed * self.omega_frame
        )

    # ------------------------------------------------------------ radial
    def _radial_update(self, vr: np.ndarray, qb: np.ndarray, rhoint: np.ndarray,
                       rhostar: np.ndarray, dt: float, dtheta: float
                       ) -> tuple[np.ndarray, np.ndarray]:
        mesh = self.mesh
        qrs = compute_star_rad(qb / rhoint, vr, mesh, dt)
        flux = dt * dtheta * qrs * rhostar * vr[: mesh.nrad + 1]
        varq = mesh.rinf[:, None] * flux[:-1] - mesh.rsup[:, None] * flux[1:]
        qb += varq * mesh.inv_surf[:, None]
        return varq, qrs

    # --------------------------------------------------------- azimuthal
    def _split_azimuthal(self, vt: np.ndarray, dt: float) -> np.ndarray:
        mesh = self.mesh
        elongation = vt * dt
        self.vmed = (elongation / dt).mean(axis=1)
        residual = elongation / dt - self.vmed[:, None]
        ntilde = self.vmed * mesh.inv_rmed * dt * mesh.nsec / (mesh.pmax - mesh.pmin)
        nround = np.floor(ntilde + 0.5)
        self.shifts = nround.astype(np.int64)
        vt[:] = ((ntilde - nround) * mesh.rmed / dt * mesh.dphi)[:, None]
        if self.fast:
            self.no_split = np.zeros(mesh.nrad, dtype=bool)
        else:
            self.no_split = np.ones(mesh.nrad, dtype=bool)
            residual += vt
            vt[:] = 0.0
        return residual

    def _theta_update(self, vt: np.ndarray, qb: np.ndarray, rhoint: np.ndarray,
                      rhostar: np.ndarray, dt: float, uniform: bool) -> None:
        mesh = self.mesh
        qrs = compute_star_theta(qb / rhoint, vt, mesh, dt)
        flux = qrs * rhostar * vt
        varq = ((mesh.rsup - mesh.rinf) * dt)[:, None] * (flux - np.roll(flux, -1, axis=1))
        active = ~self.no_split if uniform else np.ones(mesh.nrad, dtype=bool)
        qb[active] += varq[active] * mesh.inv_surf[active, None]

    def _advect_theta(self, carried: list[np.ndarray], rho: np.ndarray,
                      velocity: np.ndarray, dt: float, uniform: bool) -> None:
        rhostar = compute_star_theta(rho, velocity, self.mesh, dt)
        rhoint = rho.copy()
        for quantity in carried:
            self._theta_update(velocity, quantity, rhoint, rhostar, dt, uniform)
        self._theta_update(velocity, rho, rhoint, rhostar, dt, uniform)

    # ------------------------------------------------------------- steps
    def _fields(self, rho, vrad, vtheta):
        nr, ns = self.mesh.nrad, self.mesh.nsec
        return (
            _view(rho, nr, ns, "rho", writable=True),
            _view(vrad, nr + 1, ns, "vrad", writable=True),
            _view(vtheta, nr, ns, "vtheta", writable=True),
        )

    def _label(self, label):
        if label is None:
            raise ValueError("label advection is enabled but no label field was given")
        return _view(label, self.mesh.nrad, self.mesh.nsec, "label", writable=True)

    def step(self, rho, vrad, vtheta, energy, label, dt: float) -> float:
        """Advect the gas over ``dt`` in place; return the mass change of the innermost ring."""
        if not dt > 0.0:
            raise ValueError("the time step must be positive")
        mesh = self.mesh
        dens, vr, vt = self._fields(rho, vrad, vtheta)
        momenta = self._momenta(dens, vr, vt)
        carried = list(momenta)
        if self.energy_equation:
            if energy is None:
                raise ValueError("the energy equation is enabled but no energy field was given")
            carried.append(_view(energy, mesh.nrad, mesh.nsec, "energy", writable=True))
        lab = ext = None
        if self.advect_label:
            lab = self._label(label)
            ext = dens * lab
            carried.append(ext)

        rhostar = compute_star_rad(dens, vr, mesh, dt)
        rhoint = dens.copy()
        for quantity in carried:
            self._radial_update(vr, quantity, rhoint, rhostar, dt, mesh.dphi)
        varq, _ = self._radial_update(vr, dens, rhoint, rhostar, dt, mesh.dphi)
        lost = float(varq[0].sum())
        self.lost_mass += lost

        residual = self._split_azimuthal(vt, dt)
        self._advect_theta(carried, dens, residual, dt, uniform=False)
        self._advect_theta(carried, dens, vt, dt, uniform=True)
        for quantity in carried + [dens]:
            advect_shift(quantity, self.shifts)

        self._velocities(dens, vr, vt, momenta)
        if lab is not None:
            lab[:] = ext / dens
        return lost

    def step_dust(self, rho, rhog, vrad, vtheta, label, dt: float) -> float:
        """Advect the dust fluid over ``dt`` in place; return the mass lost at an open inner edge.

        ``rhog`` is the carrier gas density; it is checked but does not enter the fluxes.
        """
        if not dt > 0.0:
            raise ValueError("the time step must be positive")
        mesh = self.mesh
        nr, ns = mesh.nrad, mesh.nsec
        _view(rhog, nr, ns, "rhog")
        dens, vr, vt = self._fields(rho, vrad, vtheta)
        momenta = self._momenta(dens, vr, vt)
        carried = [] if self.short_friction_time else list(momenta)
        shifted = list(momenta)
        lab = ext = None
        if self.advect_label:
            lab = self._label(label)
            ext = dens * lab
            carried.append(ext)
            shifted.append(ext)

        dtheta = 2.0 * math.pi / ns
        rhostar = compute_star_rad(dens, vr, mesh, dt)
        rhoint = dens.copy()
        for quantity in carried:
            self._radial_update(vr, quantity, rhoint, rhostar, dt, dtheta)
        varq, qrs = self._radial_update(vr, dens, rhoint, rhostar, dt, dtheta)
        if self.open_inner and nr > 1:
            lost = float(varq[0].sum())
            self.acc_rate_dust = float(
                dtheta * mesh.rsup[0] * np.sum(qrs[1] * rhostar[1] * vr[1])
            )
        else:
            lost = 0.0
            self.acc_rate_dust = 0.0
        self.lost_mass_dust += lost

        residual = self._split_azimuthal(vt, dt)
        self._advect_theta(carried, dens, residual, dt, uniform=False)
        self._advect_theta(carried, dens, vt, dt, uniform=True)
        for quantity in shifted + [dens]:
            advect_shift(quantity, self.shifts)

        self._velocities(dens, vr, vt, momenta)
        if lab is not None:
            lab[:] = ext / dens
        return lost