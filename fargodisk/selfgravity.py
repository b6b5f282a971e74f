"""Disk self-gravity on a logarithmic polar mesh, computed with fast Fourier transforms.

On a logarithmic mesh the gravitational acceleration is a convolution
of a reduced density with a fixed kernel. It is computed as a product in
Fourier space. The radial direction is padded to twice the number of
rings so that the circular convolution does not wrap around.

In the zero-mode approximation only the axisymmetric part of the
self-gravity is kept, and the transforms are one-dimensional.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from .grid import Mesh, PolarGrid, make_1d_profile
from .params import G


@dataclass(eq=False)
class SelfGravity:
    """Self-gravitating acceleration of the disk.

    ``smoothing`` is the softening length of the potential, the product of
    the self-gravity thickness smoothing and the aspect ratio. With
    ``zero_mode`` only the axisymmetric component is computed.
    """

    mesh: Mesh
    smoothing: float
    zero_mode: bool = False
    counter: int = field(default=0, init=False)
    rstep: float = field(init=False)
    tstep: float = field(init=False)
    accr: np.ndarray | None = field(default=None, init=False)
    acct: np.ndarray | None = field(default=None, init=False)
    axi_accr: np.ndarray | None = field(default=None, init=False)
    _full_kernel: tuple[np.ndarray, np.ndarray] | None = field(default=None, init=False, repr=False)
    _zero_kernel: np.ndarray | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.smoothing > 0.0:
            raise ValueError("the self-gravity smoothing length must be positive")
        radii = self.mesh.radii
        n = self.mesh.nrad
        self.rstep = math.log(radii[-1] / radii[0]) / n
        steps = np.diff(np.log(radii))
        if not np.allclose(steps, self.rstep, rtol=1e-6, atol=0.0):
            raise ValueError(
                "a logarithmic grid is required to compute self-gravity with the polar method"
            )
        self.tstep = self.mesh.dphi

    # ------------------------------------------------------------- kernels
    def _log_offsets(self) -> np.ndarray:
        radii = self.mesh.radii
        n = self.mesh.nrad
        u = np.empty(2 * n)
        u[:n] = np.log(radii[:n] / radii[0])
        u[n:] = -np.log(radii[n:0:-1] / radii[0])
        return u

    def _kernel_terms(self) -> tuple[np.ndarray, np.ndarray]:
        eps2 = self.smoothing * self.smoothing
        u = self._log_offsets()[:, None]
        cos = self.mesh.cos_azimuth[None, :]
        sin = self.mesh.sin_azimuth[None, :]
        denom = np.power(eps2 * np.exp(u) + 2.0 * (np.cosh(u) - cos), -1.5)
        kr = (1.0 + eps2 - cos * np.exp(-u)) * denom
        kt = sin * denom
        return kr, kt

    def _full_kernels(self) -> tuple[np.ndarray, np.ndarray]:
        if self._full_kernel is None:
            kr, kt = self._kernel_terms()
            self._full_kernel = (np.fft.rfft2(kr), np.fft.rfft2(kt))
        return self._full_kernel

    def _zero_kernels(self) -> np.ndarray:
        if self._zero_kernel is None:
            kr, _ = self._kernel_terms()
            self._zero_kernel = np.fft.rfft(kr.sum(axis=1) * self.tstep)
        return self._zero_kernel

    def _self_force_integral(self) -> float:
        eps2 = self.smoothing * self.smoothing
        cos = self.mesh.cos_azimuth
        num = 1.0 + eps2 - cos
        den = np.power(2.0 * (1.0 - cos) + eps2, 1.5)
        return float(np.sum(num / den)) * self.tstep

    # -------------------------------------------------------------- inputs
    def _density(self, rho: PolarGrid | np.ndarray) -> np.ndarray:
        values = rho.field if isinstance(rho, PolarGrid) else np.asarray(rho, dtype=float)
        nr, ns = self.mesh.nrad, self.mesh.nsec
        if values.ndim != 2 or values.shape[0] < nr or values.shape[1] != ns:
            raise ValueError(f"density must have at least {nr} rings of {ns} sectors")
        return values[:nr]

    def _ratio(self) -> np.ndarray:
        return self.mesh.rmed / self.mesh.rmed[0]

    # -------------------------------------------------------- accelerations
    def zero_mode_acceleration(self, axidens: np.ndarray) -> np.ndarray:
        """Radial acceleration, one value per ring, of an axisymmetric density profile."""
        n = self.mesh.nrad
        axi = np.asarray(axidens, dtype=float)
        if axi.ndim != 1 or axi.size != n:
            raise ValueError(f"the axisymmetric density must hold {n} values")
        ratio = self._ratio()
        sr = np.zeros(2 * n)
        sr[:n] = axi * np.sqrt(ratio)
        conv = np.fft.irfft(self._zero_kernels() * np.fft.rfft(sr), n=2 * n)[:n]
        accr = -G * conv * self.rstep / np.sqrt(ratio)
        accr += G * axi * self.rstep * self._self_force_integral()
        return accr

    def full_acceleration(self, rho: PolarGrid | np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Radial and azimuthal accelerations on every cell of the mesh."""
        dens = self._density(rho)
        n, ns = self.mesh.nrad, self.mesh.nsec
        ratio = self._ratio()
        sr = np.zeros((2 * n, ns))
        sr[:n] = dens * np.sqrt(ratio)[:, None]
        st = np.zeros((2 * n, ns))
        st[:n] = sr[:n] * ratio[:, None]
        fkr, fkt = self._full_kernels()
        shape = (2 * n, ns)
        accr = -G * np.fft.irfft2(fkr * np.fft.rfft2(sr), s=shape)[:n]
        acct = -G * np.fft.irfft2(fkt * np.fft.rfft2(st), s=shape)[:n]
        norm = self.rstep * self.tstep
        accr *= norm / np.sqrt(ratio)[:, None]
        acct *= norm / (ratio * np.sqrt(ratio))[:, None]
        accr += G * dens * self.rstep * self.tstep / self.smoothing
        return accr, acct

    def compute(self, rho: PolarGrid | np.ndarray) -> tuple[np.ndarray, np.ndarray | None]:
        """Compute and store the self-gravitating acceleration of density ``rho``.

        Returns the radial and azimuthal accelerations. In zero mode the
        radial one has one value per ring and the azimuthal one is None.
        """
        dens = self._density(rho)
        if self.zero_mode:
            accr = self.zero_mode_acceleration(make_1d_profile(dens))
            acct = None
            axi = accr
        else:
            accr, acct = self.full_acceleration(dens)
            axi = make_1d_profile(accr)
        self.accr, self.acct, self.axi_accr = accr, acct, axi
        self.counter += 1
        return accr, acct