"""Coupling of the disk self-gravity to the gas velocities and to the planets."""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping, Sequence

import numpy as np

from .grid import Mesh, PolarGrid
from .params import G

logger = logging.getLogger(__name__)

# Anisotropy coefficient beta as a function of the ratio of the self-gravity
# smoothing length to the disk thickness.
_ANISOTROPY_BETA = ((0.1, 0.324), (0.3, 0.614), (0.6, 0.941))


def _writable(values: PolarGrid | np.ndarray, rows: int, nsec: int, what: str) -> np.ndarray:
    if isinstance(values, PolarGrid):
        array = values.data
    else:
        array = values
        if not isinstance(array, np.ndarray) or array.dtype != np.float64:
            raise TypeError(f"{what} must be a float64 array to be updated in place")
    if array.ndim != 2 or array.shape[0] < rows or array.shape[1] != nsec:
        raise ValueError(f"{what} must have at least {rows} rings of {nsec} sectors")
    return array[:rows]


def _edge_interpolation(mesh: Mesh, values: np.ndarray) -> np.ndarray:
    """Interpolate ring-centred values (first axis) to the inner edges of rings 1..n-1."""
    rmed, rinf = mesh.rmed, mesh.rinf
    spacing = rmed[1:] - rmed[:-1]
    w_here = (rinf[1:] - rmed[:-1]) / spacing
    w_below = (rmed[1:] - rinf[1:]) / spacing
    if values.ndim == 2:
        w_here, w_below = w_here[:, None], w_below[:, None]
    return w_here * values[1:] + w_below * values[:-1]


def update_sg_velocity(
    mesh: Mesh,
    vrad: PolarGrid | np.ndarray,
    vtheta: PolarGrid | np.ndarray,
    accr: np.ndarray,
    acct: np.ndarray | None,
    dt: float,
    zero_mode: bool = False,
) -> tuple[np.ndarray, np.ndarray | None]:
    """Kick the velocities with the self-gravitating acceleration over ``dt``, in place.

    The centred radial acceleration is interpolated to the ring edges where
    the radial velocity lives, the azimuthal one to the sector edges. In
    zero mode ``accr`` holds one value per ring and only the radial velocity
    changes. Returns the staggered radial and azimuthal accelerations.
    """
    nr, ns = mesh.nrad, mesh.nsec
    vr = _writable(vrad, nr, ns, "vrad")
    radial = np.zeros((nr, ns))
    if zero_mode:
        axi = np.asarray(accr, dtype=float)
        if axi.ndim != 1 or axi.size < nr:
            raise ValueError(f"the axisymmetric acceleration must hold {nr} values")
        radial[1:] = _edge_interpolation(mesh, axi[:nr])[:, None]
        vr += dt * radial
        return radial, None

    acc_r = np.asarray(accr, dtype=float)
    if acc_r.ndim != 2 or acc_r.shape[0] < nr or acc_r.shape[1] != ns:
        raise ValueError(f"the radial acceleration must have {nr} rings of {ns} sectors")
    if acct is None:
        raise ValueError("the azimuthal acceleration is required outside zero mode")
    acc_t = np.asarray(acct, dtype=float)
    if acc_t.ndim != 2 or acc_t.shape[0] < nr or acc_t.shape[1] != ns:
        raise ValueError(f"the azimuthal acceleration must have {nr} rings of {ns} sectors")
    vt = _writable(vtheta, nr, ns, "vtheta")
    acc_r, acc_t = acc_r[:nr], acc_t[:nr]
    radial[1:] = _edge_interpolation(mesh, acc_r)
    azimuthal = 0.5 * (acc_t + np.roll(acc_t, 1, axis=1))
    vr += dt * radial
    vt += dt * azimuthal
    return radial, azimuthal


def _radial_sg_at(mesh: Mesh, axi: np.ndarray, dist: float) -> float:
    rmed = mesh.rmed
    n = rmed.size
    if dist >= rmed[-1]:
        return float(axi[-1])
    ipl = 0
    while rmed[ipl] <= dist and ipl < n - 2:
        ipl += 1
    ri, rip1 = rmed[ipl], rmed[ipl + 1]
    return float(((dist - ri) * axi[ipl + 1] + (rip1 - dist) * axi[ipl]) / (rip1 - ri))


def init_planets_with_sg(
    system: Any, mesh: Mesh, axi_accr: np.ndarray, eccentricity: float = 0.0
) -> list[float]:
    """Correct the planets' initial azimuthal velocities for the disk's radial self-gravity.

    ``system`` holds sequences ``x``, ``y``, ``vy`` and ``mass`` and optionally
    ``binary``; ``vy`` is updated in place. A binary pair (planets 0 and 1)
    counts the partner's mass. Returns the radial acceleration at each
    planet's semi-major axis.
    """
    axi = np.asarray(axi_accr, dtype=float)
    if axi.ndim != 1 or axi.size != mesh.nrad:
        raise ValueError(f"the axisymmetric acceleration must hold {mesh.nrad} values")
    if mesh.nrad < 2:
        raise ValueError("at least two rings are required")
    count = len(system.x)
    binary = getattr(system, "binary", None)
    flags = [False] * count if binary is None else [bool(b) for b in binary]
    accelerations = []
    for k in range(count):
        r = math.hypot(float(system.x[k]), float(system.y[k]))
        dist = r / (1.0 + eccentricity)
        sgacc = _radial_sg_at(mesh, axi, dist)
        accelerations.append(sgacc)
        mass = float(system.mass[k])
        if flags[k]:
            if k == 0:
                total = 1.0 + mass + float(system.mass[1])
            elif k == 1:
                total = 1.0 + mass + float(system.mass[0])
            else:
                continue
        else:
            total = 1.0 + mass
        factor = 1.0 - dist * dist * sgacc / G / total
        if factor < 0.0:
            raise ValueError(f"planet {k} cannot be on a circular orbit with this self-gravity")
        system.vy[k] *= math.sqrt(factor)
    return accelerations


def init_azimuthal_velocity_with_sg(
    mesh: Mesh,
    vtheta: PolarGrid | np.ndarray,
    axi_accr: np.ndarray,
    params: Mapping[str, float],
) -> np.ndarray:
    """Set the gas azimuthal velocity to rotational equilibrium including self-gravity.

    Pressure support follows the power-law profiles of the parameters.
    Returns the velocity of each ring.
    """
    nr, ns = mesh.nrad, mesh.nsec
    vt = _writable(vtheta, nr, ns, "vtheta")
    axi = np.asarray(axi_accr, dtype=float)
    if axi.ndim != 1 or axi.size < nr:
        raise ValueError(f"the axisymmetric acceleration must hold {nr} values")
    r = mesh.rmed
    invr = 1.0 / r
    omegakep2 = G * 1.0 * invr**3
    slope, flaring, h = params["SIGMASLOPE"], params["FLARINGINDEX"], params["ASPECTRATIO"]
    support = 1.0 - (1.0 + slope - 2.0 * flaring) * h**2 * np.power(r, 2.0 * flaring)
    omega2 = omegakep2 * support - invr * axi[:nr]
    if np.any(omega2 < 0.0):
        raise ValueError("no rotational equilibrium exists for this self-gravity profile")
    velocity = r * np.sqrt(omega2)
    vt[:] = velocity[:, None]
    return velocity


def anisotropic_pressure_coeff(system: Any, params: Mapping[str, float]) -> float:
    """Anisotropy coefficient alpha = 1 - beta/Q that mimics non-axisymmetric self-gravity.

    Q is the Toomre parameter at the first planet's location; beta depends on
    the self-gravity thickness smoothing and is zero for untabulated values.
    """
    x, y = float(system.x[0]), float(system.y[0])
    rpl = math.hypot(x, y)
    q = math.pow(rpl, -2.0 + params["SIGMASLOPE"]) * params["ASPECTRATIO"] / math.pi / params["SIGMA0"]
    smoothing = params["SGTHICKNESSSMOOTHING"]
    beta = 0.0
    for eta, value in _ANISOTROPY_BETA:
        if abs(smoothing - eta) < 1e-2:
            beta = value
    alpha = 1.0 - beta / q
    logger.debug("Q = %g, beta = %g, alpha = %g", q, beta, alpha)
    return alpha