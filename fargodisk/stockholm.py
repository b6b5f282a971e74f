"""Disk forces and masses on each side of a planet's orbit, and the torque log files.

The force on a body is split into the parts exerted by the disk inside
and outside its orbit, and into a Hill-sphere-excluded part and an
annulus part between half a Hill radius and one Hill radius.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Callable

import numpy as np

from .grid import Force, Mesh, PlanetarySystem, PolarGrid
from .params import G

Smoothing = float | Callable[[float, float], float]


def _density(rho: PolarGrid | np.ndarray, mesh: Mesh) -> np.ndarray:
    values = rho.field if isinstance(rho, PolarGrid) else np.asarray(rho, dtype=float)
    if values.ndim != 2 or values.shape[0] < mesh.nrad or values.shape[1] != mesh.nsec:
        raise ValueError(f"density must have at least {mesh.nrad} rings of {mesh.nsec} sectors")
    return values[: mesh.nrad]


def compute_force_stockholm(
    mesh: Mesh,
    rho: PolarGrid | np.ndarray,
    x: float,
    y: float,
    rsmoothing: float,
    mass: float,
) -> Force:
    """Force of the disk on a body of ``mass`` at ``(x, y)``, split by orbit and Hill sphere."""
    dens = _density(rho, mesh)
    a = math.hypot(x, y)
    rh = math.pow(mass / 3.0, 1.0 / 3.0) * a + 1e-15
    cellmass = mesh.surf[:, None] * dens
    dx = mesh.cell_abscissa - x
    dy = mesh.cell_ordinate - y
    dist2 = dx * dx + dy * dy
    outside_hill = (dist2 >= rh * rh).astype(float)
    inside_hill = ((dist2 >= 0.25 * rh * rh) & (dist2 < rh * rh)).astype(float)
    smoothed = dist2 + rsmoothing * rsmoothing
    inv_dist3 = 1.0 / smoothed / np.sqrt(smoothed)
    fx = G * cellmass * dx * inv_dist3
    fy = G * cellmass * dy * inv_dist3
    inner = (mesh.rmed < a).astype(float)[:, None]
    outer = 1.0 - inner

    def total(component: np.ndarray, hill: np.ndarray, side: np.ndarray) -> float:
        return float(np.sum(component * hill * side))

    return Force(
        fx_inner=total(fx, outside_hill, inner),
        fy_inner=total(fy, outside_hill, inner),
        fx_ex_inner=total(fx, inside_hill, inner),
        fy_ex_inner=total(fy, inside_hill, inner),
        fx_outer=total(fx, outside_hill, outer),
        fy_outer=total(fy, outside_hill, outer),
        fx_ex_outer=total(fx, inside_hill, outer),
        fy_ex_outer=total(fy, inside_hill, outer),
    )


def mass_in_out(mesh: Mesh, rho: PolarGrid | np.ndarray, a: float) -> tuple[float, float]:
    """Disk mass inside and outside radius ``a``; a ring cut by ``a`` is split by area."""
    dens = _density(rho, mesh)
    rin2, rout2 = mesh.rinf**2, mesh.rsup**2
    outside = np.clip((rout2 - a * a) / (rout2 - rin2), 0.0, 1.0)
    inside = 1.0 - outside
    ring_mass = mesh.surf * dens.sum(axis=1)
    return float(np.sum(ring_mass * inside)), float(np.sum(ring_mass * outside))


def update_log_stockholm(
    system: PlanetarySystem,
    mesh: Mesh,
    rho: PolarGrid | np.ndarray,
    time: float,
    smoothing: Smoothing,
    output_dir: str | Path,
) -> list[tuple[float, ...]]:
    """Append one line per planet to ``torque<i>.dat`` in ``output_dir``.

    ``smoothing`` is either a smoothing length or a function of the planet's
    orbital radius and mass returning one. Each line holds the time, the disk
    masses inside and outside the orbit, and the inner, outer, inner
    Hill-annulus and outer Hill-annulus torques. The rows written are returned.
    """
    directory = Path(output_dir)
    rows = []
    for index in range(system.nb):
        x, y = float(system.x[index]), float(system.y[index])
        m = float(system.mass[index])
        r = math.hypot(x, y)
        length = smoothing(r, m) if callable(smoothing) else float(smoothing)
        fc = compute_force_stockholm(mesh, rho, x, y, length, m)
        massin, massout = mass_in_out(mesh, rho, r)
        row = (
            float(time),
            massin,
            massout,
            x * fc.fy_inner - y * fc.fx_inner,
            x * fc.fy_outer - y * fc.fx_outer,
            x * fc.fy_ex_inner - y * fc.fx_ex_inner,
            x * fc.fy_ex_outer - y * fc.fx_ex_outer,
        )
        with (directory / f"torque{index}.dat").open("a") as out:
            out.write("\t".join(f"{value:.18g}" for value in row) + "\n")
        rows.append(row)
    return rows