# fargodisk

Building blocks for two-dimensional polar-grid simulations of protoplanetary
discs, written with numpy. The package covers the following parts:

- `fargodisk.params`: the run parameters and their defaults (`Parameters`),
  and the fundamental constants in code units.
- `fargodisk.grid`: the polar mesh (`Mesh`), its fields (`PolarGrid`), the
  `Force` and `PlanetarySystem` records, and `make_1d_profile` for azimuthal
  averages.
- `fargodisk.profiles`: the initial surface density, dust density, internal
  energy, prescription and cooling times, viscosity and aspect-ratio profiles
  (`DiskModel`). It also has `refill_sigma` and `refill_energy`.
- `fargodisk.viscosity`: the viscous stress tensor (`compute_viscous_terms`)
  and the velocity update it drives (`update_velocities_with_viscosity`).
- `fargodisk.transport`: the transport substep with the FARGO azimuthal shift
  (`Transport.step`, `Transport.step_dust`). It also has `compute_star_rad`,
  `compute_star_theta` and `advect_shift`.
- `fargodisk.selfgravity`: disk self-gravity computed with FFTs, either in
  full 2D or in its axisymmetric (zero-mode) form (`SelfGravity`).
- `fargodisk.sgcouple`: coupling of self-gravity to the gas velocities
  (`update_sg_velocity`, `init_azimuthal_velocity_with_sg`) and to the planets
  (`init_planets_with_sg`). It also has the anisotropic-pressure coefficient
  (`anisotropic_pressure_coeff`).
- `fargodisk.turbulence`: stochastic turbulent forcing of the potential
  (`TurbulentForcing.apply`).
- `fargodisk.stockholm`: the disk force split by orbit and Hill sphere, the
  mass inside and outside an orbit, and the `torque<i>.dat` log files.
- `fargodisk.domain`: radial splitting of the mesh among processes
  (`split_domain`) and ghost-ring exchange between neighbouring subdomains
  held in memory (`exchange_boundaries`).
- `fargodisk.rebin`: resampling of restart files onto a new mesh.
- `fargodisk.merge`: concatenation of per-process output files into single
  files.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

The only runtime dependency is numpy.

## Parameters and the mesh

`Parameters.from_mapping` accepts names in any case and fills in defaults.
It raises `ParameterError` for unknown names and for missing mandatory ones.
The mandatory names are DT, SIGMA0, NINTERM, NTOT, OUTPUTDIR, NRAD, NSEC,
RMIN, RMAX, ASPECTRATIO, SIGMASLOPE and ADIABATICINDEX.

```python
from fargodisk.params import Parameters
from fargodisk.grid import Mesh

params = Parameters.from_mapping({
    "DT": 0.314, "SIGMA0": 6e-4, "NINTERM": 20, "NTOT": 1000,
    "OUTPUTDIR": "out/", "NRAD": 128, "NSEC": 256,
    "RMIN": 0.4, "RMAX": 2.5, "ASPECTRATIO": 0.05,
    "SIGMASLOPE": 0.0, "ADIABATICINDEX": 1.4,
    "RADIALSPACING": "LOGARITHMIC",
})
mesh = Mesh.from_parameters(params)
```

`Parameters.flag(name)` reads a string option as a boolean. The option counts
as true when its value starts with `Y`. If RADIALSPACING starts with `L`, the
ring edges are logarithmically spaced; otherwise they are evenly spaced.
`SelfGravity` requires a logarithmic mesh and raises `ValueError` otherwise.

## Code units

The unit of mass is one solar mass (2e30 kg) and the unit of length is 1 AU
(1.5e11 m). The unit of time is one year divided by 2π. The unit of
temperature is the one for which R/μ = 1.

```python
from fargodisk.units import to_code_units, to_physical_units

to_code_units(1.5e11, nm=0, nl=1, nt=0, nu=0)      # 1 AU -> 1.0
to_physical_units(1.0, nm=0, nl=1, nt=-1, nu=0)    # code velocity in m/s
```

The same conversion is available as a command:

```
fargodisk-units
```

The command first asks whether to convert to code units (`A`) or to
physical units (`D`). It then asks for the value and for the exponents of
mass, length, time and temperature. The answers may also be given as
command-line arguments in that order. The command then asks only for the
answers that are missing.

## Byte order of output files

Output fields are raw arrays of 8-byte floats. To reverse the byte order of
every double in a file, in place, run:

```
fargodisk-byteswap gasdens10.dat
```

From Python, `fargodisk.byteswap.swap_doubles` does the same on a `bytes`
object and `fargodisk.byteswap.swap_file` does it on a path. Trailing bytes
that do not fill a whole double are left as they are.

## What the package does not do

The package provides the physics and bookkeeping pieces of a simulation. It
does not provide a complete simulation:

- There is no main time-stepping loop and no command that runs a simulation.
- There is no reader for parameter files. Parameters come from a mapping.
- Planets are not integrated on their orbits.
- There are no boundary conditions or source terms beyond those listed above.
- There are no Lagrangian dust particles.
- There is no message passing between processes. Domain splitting and
  ghost-ring exchange work on subdomains held in one Python process.