"""Viscous stress tensor on the polar mesh and the velocity update it drives."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .grid import Mesh, PolarGrid
from .profiles import DiskModel


@dataclass(eq=False)
class ViscousStress:
    """Strain-rate and stress tensor components, one value per cell."""

    drr: np.ndarray
    drp: np.ndarray
    dpp: np.ndarray
    trr: np.ndarray
    trp: np.ndarray
    tpp: np.ndarray


def _rows(values: PolarGrid | np.ndarray, rows: int, nsec: int) -> np.ndarray:
    array = values.data if isinstance(values, PolarGrid) else np.asarray(values, dtype=float)
    if array.ndim != 2 or array.shape[0] < rows or array.shape[1] != nsec:
        raise ValueError(f"field must have at least {rows} rings of {nsec} sectors")
    return array[:rows]


def _ring_viscosity(model: DiskModel, mesh: Mesh, dust: bool) -> np.ndarray:
    p = model.params
    if dust:
        active = p["DALPHAVISCOSITY"] != 0.0 or p["DVISCOSITY"] != 0.0
        func = model.dust_viscosity
    else:
        active = p["ALPHAVISCOSITY"] != 0.0 or p["VISCOSITY"] != 0.0
        func = model.viscosity
    if not active:
        return np.zeros(mesh.nrad)
    return np.array([func(float(r)) for r in mesh.rmed])


def compute_viscous_terms(
    model: DiskModel,
    mesh: Mesh,
    vrad: PolarGrid | np.ndarray,
    vtheta: PolarGrid | np.ndarray,
    rho: PolarGrid | np.ndarray,
    divergence: PolarGrid | np.ndarray,
    dust: bool = False,
) -> ViscousStress:
    """Compute the viscous stress tensor of one fluid (gas, or dust if ``dust``)."""
    nr, ns = mesh.nrad, mesh.nsec
    vr = _rows(vrad, nr + 1, ns)
    vt = _rows(vtheta, nr, ns)
    dens = _rows(rho, nr, ns)
    div = _rows(divergence, nr, ns)
    invdphi = 1.0 / mesh.dphi
    inv_rmed = mesh.inv_rmed[:, None]

    vr_in, vr_out = vr[:nr], vr[1 : nr + 1]
    drr = (vr_out - vr_in) * mesh.inv_diff_rsup[:, None]
    dpp = (np.roll(vt, -1, axis=1) - vt) * invdphi * inv_rmed + 0.5 * (vr_out + vr_in) * inv_rmed
    drp = np.zeros((nr, ns))
    vr_jm = np.roll(vr_in, 1, axis=1)
    drp[1:] = 0.5 * (
        mesh.rinf[1:, None]
        * (vt[1:] * inv_rmed[1:] - vt[:-1] * inv_rmed[:-1])
        * mesh.inv_diff_rmed[1:, None]
        + (vr_in[1:] - vr_jm[1:]) * invdphi * mesh.inv_rinf[1:, None]
    )

    nu = _ring_viscosity(model, mesh, dust)[:, None]
    trr = 2.0 * dens * nu * (drr - div / 3.0)
    tpp = 2.0 * dens * nu * (dpp - div / 3.0)
    dens_jm = np.roll(dens, 1, axis=1)
    trp = np.zeros((nr, ns))
    trp[1:] = (
        2.0 * 0.25 * (dens[1:] + dens[:-1] + dens_jm[1:] + dens_jm[:-1]) * nu[1:] * drp[1:]
    )
    return ViscousStress(drr=drr, drp=drp, dpp=dpp, trr=trr, trp=trp, tpp=tpp)


def update_velocities_with_viscosity(
    mesh: Mesh,
    vrad: PolarGrid | np.ndarray,
    vtheta: PolarGrid | np.ndarray,
    rho: PolarGrid | np.ndarray,
    stress: ViscousStress,
    dt: float,
) -> None:
    """Apply the viscous source term of the Navier-Stokes equations to the velocities, in place."""
    nr, ns = mesh.nrad, mesh.nsec
    vr = _rows(vrad, nr, ns)
    vt = _rows(vtheta, nr, ns)
    dens = _rows(rho, nr, ns)
    trr, trp, tpp = stress.trr, stress.trp, stress.tpp
    invdphi = 1.0 / mesh.dphi
    dens_jm = np.roll(dens, 1, axis=1)
    tpp_jm = np.roll(tpp, 1, axis=1)
    trp_jp = np.roll(trp, -1, axis=1)

    mid, nxt = slice(1, nr - 1), slice(2, nr)
    dvt = (
        dt
        * mesh.inv_rmed[mid, None]
        * (
            (mesh.rsup[mid, None] * trp[nxt] - mesh.rinf[mid, None] * trp[mid])
            * mesh.inv_diff_rsup[mid, None]
            + (tpp[mid] - tpp_jm[mid]) * invdphi
            + 0.5 * (trp[mid] + trp[nxt])
        )
        / (0.5 * (dens[mid] + dens_jm[mid]))
    )
    dvr = (
        dt
        * mesh.inv_rinf[1:, None]
        * (
            (mesh.rmed[1:, None] * trr[1:] - mesh.rmed[:-1, None] * trr[:-1])
            * mesh.inv_diff_rmed[1:, None]
            + (trp_jp[1:] - trp[1:]) * invdphi
            - 0.5 * (tpp[1:] + tpp[:-1])
        )
        / (0.5 * (dens[1:] + dens[:-1]))
    )
    vt[mid] += dvt
    vr[1:] += dvr