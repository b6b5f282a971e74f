"""Building blocks for polar-grid hydrodynamics of protoplanetary discs: mesh, profiles, viscosity, transport, self-gravity, turbulence and output tools."""

__version__ = "0.1.0"