"""Radial splitting of the mesh among processes, and exchange of their ghost rings.

Each process describes a contiguous band of rings. Apart from the
innermost and outermost processes, each band carries ``CPU_OVERLAP``
ghost rings on each side, filled from the active rings of its neighbours.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

import numpy as np

from .grid import PolarGrid

CPU_OVERLAP = 6


@dataclass(frozen=True)
class Subdomain:
    """The band of rings described by one process, in global and local indices."""

    rank: int
    cpu_number: int
    global_nrad: int
    imin: int
    imax: int
    nrad: int
    zero_or_active: int
    one_or_active: int
    max_or_active: int
    maxmo_or_active: int
    prev: int | None
    next: int | None

    @property
    def highest(self) -> int:
        return self.cpu_number - 1

    @property
    def active_rings(self) -> range:
        """Global indices of the rings this process is responsible for."""
        return range(self.imin + self.zero_or_active, self.imin + self.max_or_active)


def split_domain(nrad: int, cpu_number: int, rank: int) -> Subdomain:
    """Share ``nrad`` rings among ``cpu_number`` processes, round-robin, and describe ``rank``'s."""
    if cpu_number < 1:
        raise ValueError("there must be at least one process")
    if not 0 <= rank < cpu_number:
        raise ValueError(f"rank {rank} is outside 0..{cpu_number - 1}")
    size_low = nrad // cpu_number
    size_high = size_low + 1
    remainder = nrad % cpu_number
    if size_low < 2 * CPU_OVERLAP:
        raise ValueError(
            "the number of processes is too large or the mesh is radially too narrow"
        )
    if rank < remainder:
        imin = size_high * rank
        imax = imin + size_high - 1
    else:
        imin = size_high * remainder + (rank - remainder) * size_low
        imax = imin + size_low - 1
    inner = rank > 0
    outer = rank < cpu_number - 1
    if inner:
        imin -= CPU_OVERLAP
    if outer:
        imax += CPU_OVERLAP
    local = imax - imin + 1
    return Subdomain(
        rank=rank,
        cpu_number=cpu_number,
        global_nrad=nrad,
        imin=imin,
        imax=imax,
        nrad=local,
        zero_or_active=CPU_OVERLAP if inner else 0,
        one_or_active=1 + (CPU_OVERLAP - 1) * inner,
        max_or_active=local - CPU_OVERLAP * outer,
        maxmo_or_active=local - 1 - (CPU_OVERLAP - 1) * outer,
        prev=rank - 1 if inner else None,
        next=rank + 1 if outer else None,
    )


def boundary_buffer_size(nsec: int, energy: bool = False, label: bool = False,
                         dust: bool = False) -> int:
    """Number of values sent across one boundary: density and two velocities, plus options."""
    fields = 3 + int(energy) + int(label) + 3 * int(dust)
    return fields * nsec * CPU_OVERLAP


def _rings(value: PolarGrid | np.ndarray, name: str) -> np.ndarray:
    if isinstance(value, PolarGrid):
        array = value.data[: value.nrad]
    else:
        if not isinstance(value, np.ndarray) or value.ndim != 2:
            raise TypeError(f"field {name!r} must be a 2-D array")
        array = value
    if array.shape[0] < 2 * CPU_OVERLAP:
        raise ValueError(f"field {name!r} has fewer than {2 * CPU_OVERLAP} rings")
    return array


def exchange_boundaries(domains: Sequence[Mapping[str, PolarGrid | np.ndarray]]) -> None:
    """Fill the ghost rings of neighbouring processes from each other's active rings.

    ``domains`` lists, innermost first, one mapping of field name to field
    per process; all mappings hold the same names. Fields are updated in place.
    """
    arrays = [{name: _rings(value, name) for name, value in d.items()} for d in domains]
    if not arrays:
        return
    names = set(arrays[0])
    if any(set(a) != names for a in arrays):
        raise ValueError("every process must hold the same fields")
    o = CPU_OVERLAP
    inner_send = [{n: x[o : 2 * o].copy() for n, x in a.items()} for a in arrays]
    outer_send = [
        {n: x[x.shape[0] - 2 * o : x.shape[0] - o].copy() for n, x in a.items()} for a in arrays
    ]
    for index, (low, high) in enumerate(zip(arrays, arrays[1:])):
        for name in names:
            if low[name].shape[1] != high[name].shape[1]:
                raise ValueError(f"field {name!r} has different sector counts on neighbours")
            high[name][:o] = outer_send[index][name]
            low[name][low[name].shape[0] - o :] = inner_send[index + 1][name]