"""Resampling of restart files written on a different mesh.

At a restart the hydrodynamical fields are rebinned by bilinear
interpolation whenever the previous mesh differs from the current one in
its number of rings or sectors, or in the position of any ring edge.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from .grid import Mesh

logger = logging.getLogger(__name__)

REBIN_KINDS = ("dens", "Temperature", "vrad", "vtheta", "label")


@dataclass(eq=False)
class PreviousMesh:
    """Ring edges and sector count of the mesh a restart file was written on."""

    radii: np.ndarray
    nsec: int

    def __post_init__(self) -> None:
        self.radii = np.asarray(self.radii, dtype=float)
        if self.radii.ndim != 1 or self.radii.size < 2:
            raise ValueError("at least two ring edges are required")
        if self.nsec < 1:
            raise ValueError("at least one sector is required")

    @property
    def nrad(self) -> int:
        return self.radii.size - 1

    @property
    def rmed(self) -> np.ndarray:
        inner, outer = self.radii[:-1], self.radii[1:]
        return 2.0 / 3.0 * (outer**3 - inner**3) / (outer**2 - inner**2)


def read_previous_dimensions(output_dir: str | Path) -> PreviousMesh | None:
    """Read ``dims.dat`` and ``used_rad.dat``; return None if either is missing."""
    directory = Path(output_dir)
    dims, rad = directory / "dims.dat", directory / "used_rad.dat"
    if not dims.is_file() or not rad.is_file():
        return None
    tokens = dims.read_text().split()
    if len(tokens) < 8:
        raise ValueError(f"{dims} does not hold the eight expected values")
    nrad, nsec = int(tokens[6]), int(tokens[7])
    values = rad.read_text().split()
    if len(values) < nrad + 1:
        raise ValueError(f"{rad} holds fewer than {nrad + 1} ring edges")
    return PreviousMesh(np.array([float(v) for v in values[: nrad + 1]]), nsec)


def rebin_needed(previous: PreviousMesh | None, mesh: Mesh) -> bool:
    """Whether fields written on ``previous`` must be resampled onto ``mesh``."""
    if previous is None:
        return True
    if previous.nsec != mesh.nsec or previous.nrad != mesh.nrad:
        return True
    return bool(np.any(np.abs((mesh.radii - previous.radii) / mesh.radii) > 1e-9))


def rebin_field(old: np.ndarray, previous: PreviousMesh, mesh: Mesh, kind: str) -> np.ndarray:
    """Bilinearly interpolate a field of the given kind from ``previous`` onto ``mesh``.

    Radial velocities live on ring edges and azimuthal velocities half a
    sector off centre; other kinds live at cell centres.
    """
    if kind not in REBIN_KINDS:
        raise ValueError(f"unknown field kind {kind!r}")
    onr, ons = previous.nrad, previous.nsec
    if onr < 2:
        raise ValueError("the previous mesh needs at least two rings")
    values = np.asarray(old, dtype=float)
    if values.size != onr * ons:
        raise ValueError(f"field must hold {onr * ons} values")
    values = values.reshape(onr, ons)

    if kind == "vrad":
        old_r = previous.radii
        new_r = mesh.radii[: mesh.nrad].copy()
    else:
        old_r = previous.rmed
        new_r = mesh.rmed.copy()
    dangle = 0.5 if kind == "vtheta" else 0.0
    new_r = np.clip(new_r, old_r[0], old_r[onr - 1])

    found = np.searchsorted(old_r[1:onr], new_r, side="right")
    low = new_r <= old_r[0]
    high = new_r >= old_r[onr - 1]
    iold = np.where(low, 0, np.where(high, onr - 2, np.minimum(found, onr - 2)))
    with np.errstate(divide="ignore", invalid="ignore"):
        interior = (new_r - old_r[iold]) / (old_r[iold + 1] - old_r[iold])
    ifrac = np.where(low, 0.0, np.where(high, 1.0, interior))

    span = mesh.pmax - mesh.pmin
    angle = (np.arange(mesh.nsec) - dangle) / mesh.nsec * span
    jreal = angle / span * ons + dangle
    jreal = np.where(jreal < 0.0, jreal + ons * np.ceil(-jreal / ons), jreal)
    jold = jreal.astype(np.int64) % ons
    jfrac = jreal - jold
    jnext = (jold + 1) % ons

    here, there = values[iold], values[iold + 1]
    fi, fj = ifrac[:, None], jfrac[None, :]
    return (
        here[:, jold] * (1.0 - fi) * (1.0 - fj)
        + here[:, jnext] * (1.0 - fi) * fj
        + there[:, jold] * fi * (1.0 - fj)
        + there[:, jnext] * fi * fj
    )


def check_rebin(
    output_dir: str | Path, number: int, previous: PreviousMesh | None, mesh: Mesh
) -> list[Path]:
    """Rebin the restart files ``gas<kind><number>.dat`` in place if the mesh changed.

    Returns the files that were rewritten; missing files are reported in the log.
    """
    if not rebin_needed(previous, mesh):
        return []
    if previous is None:
        raise ValueError("the previous mesh is unknown; cannot rebin")
    logger.info("Restart/Old mesh mismatch. Rebin needed.")
    count = previous.nrad * previous.nsec
    rewritten = []
    for kind in REBIN_KINDS:
        path = Path(output_dir) / f"gas{kind}{number}.dat"
        if not path.is_file():
            logger.warning("Could not rebin %s. File not found", path)
            continue
        data = np.fromfile(path, dtype=np.float64)
        if data.size < count:
            raise ValueError(f"{path} holds fewer than {count} values")
        rebin_field(data[:count], previous, mesh, kind).astype(np.float64).tofile(path)
        rewritten.append(path)
    return rewritten