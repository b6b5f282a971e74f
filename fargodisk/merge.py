"""Merging of the per-process output files into single sequential files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

logger = logging.getLogger(__name__)

GAS_OUTPUTS = (
    ("gasdens", "density"),
    ("gasvrad", "velocity"),
    ("gasvtheta", "velocity"),
    ("gasenergy", "energy"),
    ("Temperature", "temperature"),
    ("DivV", "divv"),
    ("ViscousHeating", "visc_heat"),
    ("EntropyDiff", "ther_diff"),
    ("RadiativeKCoeff", "rad_diff"),
    ("ThermalCooling", "ther_cool"),
    ("Potential", "potential"),
    ("Test", "test"),
    ("sgaccr", "gr"),
    ("sgacctheta", "gtheta"),
    ("torquesg", "gtheta"),
    ("torquesumdisc", "gtheta"),
    ("pcdens", "dust_density"),
    ("RadFBAcc", "rad_fb_acc"),
    ("AziFBAcc", "azi_fb_acc"),
    ("gaslabel", "label"),
)

DUST_OUTPUTS = (
    ("dustdens", "density"),
    ("dustvrad", "velocity"),
    ("dustvtheta", "velocity"),
    ("Stokes", "stokes"),
)


def _merge_order(cpu_number: int, fftw_split: bool) -> list[int]:
    """Ranks whose pieces are appended, in order, after the rank-0 file."""
    if cpu_number < 1:
        raise ValueError("there must be at least one process")
    if not fftw_split:
        return list(range(1, cpu_number))
    one_if_odd = cpu_number % 2
    total = cpu_number + one_if_odd
    half = total // 2
    highest = (cpu_number - 1) // 2 if one_if_odd else cpu_number - 1
    order = []
    for rank in range(half):
        if rank != 0:
            order.append(rank)
        if rank != highest:
            order.append((rank + half) % total)
    return order


def merge_radix(
    output_dir: str | Path, radix: str, number: int, cpu_number: int, fftw_split: bool = False
) -> Path:
    """Append the pieces ``<radix><number>.dat.NNNNN`` to ``<radix><number>.dat``, then delete them.

    With ``fftw_split`` the pieces follow the interleaved order of the
    self-gravity domain decomposition. Missing pieces are reported in the log.
    """
    directory = Path(output_dir)
    target = directory / f"{radix}{number}.dat"
    with target.open("ab") as out:
        for rank in _merge_order(cpu_number, fftw_split):
            piece = directory / f"{radix}{number}.dat.{rank:05d}"
            try:
                out.write(piece.read_bytes())
            except FileNotFoundError:
                logger.warning("missing output piece %s", piece)
    for piece in directory.glob(f"{radix}{number}.dat.0*"):
        piece.unlink()
    return target


def merge(
    output_dir: str | Path,
    number: int,
    flags: Mapping[str, bool],
    cpu_number: int,
    fftw_split: bool = False,
) -> list[str]:
    """Merge the gas outputs of output ``number`` whose write switch is set in ``flags``.

    ``flags`` maps switch names (``density``, ``velocity``, ``energy``, ...,
    ``label``) to booleans; the particle density also needs ``particles``.
    Returns the names of the merged outputs.
    """
    merged = []
    for radix, switch in GAS_OUTPUTS:
        wanted = bool(flags.get(switch, False))
        if radix == "pcdens":
            wanted = wanted and bool(flags.get("particles", False))
        if wanted:
            merge_radix(output_dir, radix, number, cpu_number, fftw_split)
            merged.append(radix)
    return merged


def merge_dust(
    output_dir: str | Path,
    number: int,
    flags: Mapping[str, bool],
    cpu_number: int,
    fftw_split: bool = False,
) -> list[str]:
    """Merge the dust-fluid outputs of output ``number`` whose switch is set in ``flags``."""
    merged = []
    for radix, switch in DUST_OUTPUTS:
        if flags.get(switch, False):
            merge_radix(output_dir, radix, number, cpu_number, fftw_split)
            merged.append(radix)
    return merged