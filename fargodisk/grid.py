"""Polar meshes, grid fields and the small records shared across the simulation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from .params import Parameters

MAX1D = 32768


@dataclass(eq=False)
class PolarGrid:
    """A named scalar field on a polar mesh.

    ``data`` holds one extra ring beyond the mesh so that stencils reaching
    ring ``i+1`` stay in bounds; ``field`` is the view over the real rings.
    """

    name: str
    data: np.ndarray

    def __post_init__(self) -> None:
        self.data = np.asarray(self.data, dtype=float)
        if self.data.ndim != 2 or self.data.shape[0] < 2 or self.data.shape[1] < 1:
            raise ValueError("grid data must be 2-D with at least one ring and one sector")

    @classmethod
    def zeros(cls, nrad: int, nsec: int, name: str) -> "PolarGrid":
        """Create a zero-filled grid of ``nrad`` rings and ``nsec`` sectors."""
        if nrad < 1 or nsec < 1:
            raise ValueError("a grid needs at least one ring and one sector")
        return cls(name, np.zeros((nrad + 1, nsec)))

    @property
    def nrad(self) -> int:
        return self.data.shape[0] - 1

    @property
    def nsec(self) -> int:
        return self.data.shape[1]

    @property
    def field(self) -> np.ndarray:
        return self.data[:-1]


@dataclass(eq=False)
class Mesh:
    """Radial and azimuthal geometry of the polar mesh."""

    radii: np.ndarray
    nsec: int
    pmin: float
    pmax: float
    rinf: np.ndarray = field(init=False)
    rsup: np.ndarray = field(init=False)
    rmed: np.ndarray = field(init=False)
    surf: np.ndarray = field(init=False)
    inv_rmed: np.ndarray = field(init=False)
    inv_surf: np.ndarray = field(init=False)
    inv_rinf: np.ndarray = field(init=False)
    inv_diff_rmed: np.ndarray = field(init=False)
    inv_diff_rsup: np.ndarray = field(init=False)
    azimuth: np.ndarray = field(init=False)
    cos_azimuth: np.ndarray = field(init=False)
    sin_azimuth: np.ndarray = field(init=False)

    def __post_init__(self) -> None:
        radii = np.asarray(self.radii, dtype=float)
        if radii.ndim != 1 or radii.size < 2:
            raise ValueError("at least two ring edges are required")
        if np.any(np.diff(radii) <= 0.0) or radii[0] <= 0.0:
            raise ValueError("ring edges must be positive and strictly increasing")
        if self.nsec < 1:
            raise ValueError("at least one sector is required")
        if self.pmax <= self.pmin:
            raise ValueError("pmax must exceed pmin")
        self.radii = radii
        self.rinf = radii[:-1].copy()
        self.rsup = radii[1:].copy()
        rin2, rout2 = self.rinf**2, self.rsup**2
        self.rmed = 2.0 / 3.0 * (self.rsup**3 - self.rinf**3) / (rout2 - rin2)
        self.surf = 0.5 * (self.pmax - self.pmin) * (rout2 - rin2) / self.nsec
        self.inv_rmed = 1.0 / self.rmed
        self.inv_surf = 1.0 / self.surf
        self.inv_rinf = 1.0 / self.rinf
        self.inv_diff_rsup = 1.0 / (self.rsup - self.rinf)
        inv_diff_rmed = np.zeros(self.rmed.size)
        inv_diff_rmed[1:] = 1.0 / np.diff(self.rmed)
        self.inv_diff_rmed = inv_diff_rmed
        self.azimuth = self.pmin + (self.pmax - self.pmin) * np.arange(self.nsec) / self.nsec
        self.cos_azimuth = np.cos(self.azimuth)
        self.sin_azimuth = np.sin(self.azimuth)

    @classmethod
    def from_radii(cls, radii: Sequence[float], nsec: int, pmin: float, pmax: float) -> "Mesh":
        """Build a mesh from explicit ring edges (``nrad + 1`` values)."""
        return cls(np.asarray(radii, dtype=float), int(nsec), float(pmin), float(pmax))

    @classmethod
    def from_parameters(cls, params: Parameters) -> "Mesh":
        """Build the mesh described by NRAD, NSEC, RMIN, RMAX, PMIN, PMAX and RADIALSPACING."""
        nrad = params["NRAD"]
        if nrad < 1:
            raise ValueError("NRAD must be positive")
        rmin, rmax = params["RMIN"], params["RMAX"]
        steps = np.arange(nrad + 1) / nrad
        if str(params["RADIALSPACING"])[:1] in ("l", "L"):
            radii = rmin * np.exp(steps * np.log(rmax / rmin))
        else:
            radii = rmin + (rmax - rmin) * steps
        return cls.from_radii(radii, params["NSEC"], params["PMIN"], params["PMAX"])

    @property
    def nrad(self) -> int:
        return self.rmed.size

    @property
    def dphi(self) -> float:
        return (self.pmax - self.pmin) / self.nsec

    @property
    def cell_abscissa(self) -> np.ndarray:
        return np.outer(self.rmed, self.cos_azimuth)

    @property
    def cell_ordinate(self) -> np.ndarray:
        return np.outer(self.rmed, self.sin_azimuth)


@dataclass
class Force:
    """Disk force on a body, split into inner/outer disk and Hill-excluded parts."""

    fx_inner: float = 0.0
    fy_inner: float = 0.0
    fx_ex_inner: float = 0.0
    fy_ex_inner: float = 0.0
    fx_outer: float = 0.0
    fy_outer: float = 0.0
    fx_ex_outer: float = 0.0
    fy_ex_outer: float = 0.0


@dataclass(eq=False)
class PlanetarySystem:
    """Masses, positions, velocities and options of the planets."""

    mass: np.ndarray
    x: np.ndarray
    y: np.ndarray
    vx: np.ndarray
    vy: np.ndarray
    acc: np.ndarray | None = None
    name: list[str] | None = None
    feel_disk: np.ndarray | None = None
    feel_others: np.ndarray | None = None
    binary: np.ndarray | None = None

    def __post_init__(self) -> None:
        self.mass = np.asarray(self.mass, dtype=float)
        n = self.mass.size
        for attr in ("x", "y", "vx", "vy"):
            setattr(self, attr, np.asarray(getattr(self, attr), dtype=float))
        self.acc = np.zeros(n) if self.acc is None else np.asarray(self.acc, dtype=float)
        self.name = [f"planet{k}" for k in range(n)] if self.name is None else list(self.name)
        self.feel_disk = (
            np.ones(n, dtype=bool) if self.feel_disk is None else np.asarray(self.feel_disk, dtype=bool)
        )
        self.feel_others = (
            np.ones(n, dtype=bool)
            if self.feel_others is None
            else np.asarray(self.feel_others, dtype=bool)
        )
        self.binary = (
            np.zeros(n, dtype=bool) if self.binary is None else np.asarray(self.binary, dtype=bool)
        )
        lengths = {
            len(value)
            for value in (
                self.x, self.y, self.vx, self.vy, self.acc,
                self.name, self.feel_disk, self.feel_others, self.binary,
            )
        }
        if lengths != {n}:
            raise ValueError("all planet attributes must have one entry per planet")

    @property
    def nb(self) -> int:
        return self.mass.size

    def __len__(self) -> int:
        return self.nb


def make_1d_profile(field: PolarGrid | np.ndarray) -> np.ndarray:
    """Return the azimuthal average of a field, one value per ring."""
    values = field.field if isinstance(field, PolarGrid) else np.asarray(field, dtype=float)
    if values.ndim != 2:
        raise ValueError("a 2-D field (rings x sectors) is required")
    return values.mean(axis=1)