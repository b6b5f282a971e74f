"""Run parameters of a disk simulation and fundamental code constants."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Mapping

# Fundamental constants in code units.
G = 1.0
PI4 = 12.56637061435917295376
PI = 3.14159265358979323844
CPUOVERLAP = 6
MU = 1.0
R = 1.0


class ParamType(enum.Enum):
    """Kind of value a parameter holds."""

    REAL = "real"
    INT = "int"
    STRING = "string"


class ParameterError(ValueError):
    """Raised when a parameter set is incomplete or malformed."""


@dataclass(frozen=True)
class ParameterSpec:
    """Declaration of one parameter: its name, kind, whether it is mandatory and its default."""

    name: str
    kind: ParamType
    necessary: bool
    default: str


_R, _I, _S = ParamType.REAL, ParamType.INT, ParamType.STRING

_TABLE = (
    ("DT", _R, True, "1."),
    ("SIGMA0", _R, True, "173."),
    ("NINTERM", _I, True, "10."),
    ("NTOT", _I, True, "1501."),
    ("OUTPUTDIR", _S, True, "./"),
    ("INNERBOUNDARY", _S, False, "WALL"),
    ("INNERBOUNDARYDUST", _S, False, "WALL"),
    ("LABELADVECTION", _S, False, "NO"),
    ("TRANSPORT", _S, False, "FAST"),
    ("PLANETCONFIG", _S, False, "Systems/SolarSystem.cfg"),
    ("MASSTAPER", _R, False, "0.0000001"),
    ("RADIALSPACING", _S, False, "ARITHMETIC"),
    ("NRAD", _I, True, "64.0"),
    ("NSEC", _I, True, "64.0"),
    ("RMIN", _R, True, "1.0"),
    ("RMAX", _R, True, "1.0"),
    ("THICKNESSSMOOTHING", _R, False, "0.3"),
    ("SGTHICKNESSSMOOTHING", _R, False, "0.3"),
    ("ROCHESMOOTHING", _R, False, "0.0"),
    ("ASPECTRATIO", _R, True, "0.05"),
    ("VISCOSITY", _R, False, "0.0"),
    ("RELEASEVISCOSITY", _R, False, "0.0"),
    ("RELEASEDATEVISCOSITY", _R, False, "0.0"),
    ("ALPHAVISCOSITY", _R, False, "0.0"),
    ("SIGMASLOPE", _R, True, "0.0"),
    ("RELEASERADIUS", _R, False, "0.0"),
    ("RELEASEDATE", _R, False, "0.0"),
    ("OMEGAFRAME", _R, False, "0.0"),
    ("DISK", _S, False, "YES"),
    ("FRAME", _S, False, "FIXED"),
    ("OUTERSOURCEMASS", _S, False, "NO"),
    ("WRITEDENSITY", _S, False, "YES"),
    ("WRITEVELOCITY", _S, False, "YES"),
    ("WRITEENERGY", _S, False, "NO"),
    ("WRITETEMPERATURE", _S, False, "NO"),
    ("WRITEDIVV", _S, False, "NO"),
    ("WRITEPOTENTIAL", _S, False, "NO"),
    ("WRITEVISCHEAT", _S, False, "NO"),
    ("WRITETHERDIFF", _S, False, "NO"),
    ("WRITERADDIFF", _S, False, "NO"),
    ("WRITETHERCOOL", _S, False, "NO"),
    ("WRITEDUSTDENSITY", _S, False, "NO"),
    ("WRITEDUSTSTOKES", _S, False, "NO"),
    ("WRITETEST", _S, False, "NO"),
    ("WRITERADFBACC", _S, False, "NO"),
    ("WRITEAZIFBACC", _S, False, "NO"),
    ("INDIRECTTERM", _S, False, "YES"),
    ("DISCARDGASINDIRECTTERM", _S, False, "NO"),
    ("EXCLUDEHILL", _S, False, "NO"),
    ("EXCLUDEHILLFACTOR", _R, False, "1.0"),
    ("IMPOSEDDISKDRIFT", _R, False, "0.0"),
    ("FLARINGINDEX", _R, False, "0.0"),
    ("ECCENTRICITY", _R, False, "0.0"),
    ("CAVITYRADIUS", _R, False, "0.0"),
    ("CAVITYRATIO", _R, False, "1.0"),
    ("CAVITYWIDTH", _R, False, "1.0"),
    ("TRANSITIONRADIUS", _R, False, "0.0"),
    ("TRANSITIONRATIO", _R, False, "1.0"),
    ("TRANSITIONWIDTH", _R, False, "1.0"),
    ("LAMBDADOUBLING", _R, False, "0.0"),
    ("SELFGRAVITY", _S, False, "NO"),
    ("CICPLANET", _S, False, "NO"),
    ("FORCEDCIRCULAR", _S, False, "NO"),
    ("FORCEDINNERCIRCULAR", _S, False, "NO"),
    ("ZMPLUS", _S, False, "NO"),
    ("ENERGYEQUATION", _S, False, "NO"),
    ("ADIABATICINDEX", _R, True, "1.4"),
    ("PLANETASPECTRATIO", _R, False, "0.5"),
    ("ENTROPYDIFFUSION", _S, False, "NO"),
    ("RADIATIVEDIFFUSION", _S, False, "NO"),
    ("THERMALCOOLING", _S, False, "NO"),
    ("STELLARIRRADIATION", _S, False, "NO"),
    ("STELLARLUMINOSITY", _R, False, "1.0"),
    ("BACKGROUNDTEMPERATURE", _R, False, "50.0"),
    ("SLOPEBACKGROUNDTEMPERATURE", _R, False, "-0.5"),
    ("VISCOUSHEATING", _S, False, "YES"),
    ("DIFFUSIVITY", _R, False, "0.000001"),
    ("TEMPPRESC", _S, False, "NO"),
    ("PRESCTIME0", _R, False, "6.28"),
    ("MHD", _S, False, "NO"),
    ("SOFTWRITING", _S, False, "NO"),
    ("RETROGRADEPLANET", _S, False, "NO"),
    ("GAMMATURB", _R, False, "0.00001"),
    ("LSAMODESPEEDUP", _R, False, "0.1"),
    ("NBTURBMODES", _I, False, "50"),
    ("HIGHMCUTOFF", _S, False, "NO"),
    ("PMIN", _R, False, "0.0"),
    ("PMAX", _R, False, "6.2831853071795864"),
    ("ADDMASS", _S, False, "NO"),
    ("BINARYSEPARATION", _R, False, "0.3"),
    ("BINARYECCENTRICITY", _R, False, "0.0"),
    ("RETROGRADEBINARY", _S, False, "NO"),
    ("IMPOSEDDENSITY", _S, False, "NO"),
    ("FACTORUNITMASS", _R, False, "1.0"),
    ("FACTORUNITLENGTH", _R, False, "1.0"),
    ("FACTORMMW", _R, False, "1.0"),
    ("BETACOOLING", _S, False, "NO"),
    ("BETACOOLINGTIME", _R, False, "10.0"),
    ("BETACOOLINGSLOPE", _R, False, "0.0"),
    ("WRITEGR", _S, False, "NO"),
    ("WRITEGTHETA", _S, False, "NO"),
    ("ADDNOISE", _S, False, "NO"),
    ("WKZRMIN", _R, False, "0.0"),
    ("WKZRMAX", _R, False, "0.0"),
    ("READPLANETFILEATRESTART", _S, False, "YES"),
    ("DONTAPPLYSUBKEPLERIAN", _S, False, "NO"),
    ("DENSDAMPRAD", _R, False, "0.0"),
    ("DAMPTOINI", _S, False, "NO"),
    ("DAMPTOAXI", _S, False, "YES"),
    ("DAMPTOVISCOUS", _S, False, "NO"),
    ("COROTATEWITHOUTERPLANET", _S, False, "NO"),
    ("DISCEVAPORATION", _S, False, "NO"),
    ("TEVAP", _R, False, "0.0"),
    ("CUSTIT", _S, False, "NO"),
    ("TURBRMIN", _R, False, "0.0"),
    ("TURBRMAX", _R, False, "0.0"),
    ("ADDFLOORS", _S, False, "YES"),
    ("SIZEMINPART", _R, False, "0.001"),
    ("SIZEMAXPART", _R, False, "0.001"),
    ("SIZEPARTSLOPE", _R, False, "3.0"),
    ("RHOPART", _R, False, "1.0"),
    ("NBPART", _I, False, "0"),
    ("DUSTSLOPE", _R, False, "0.5"),
    ("DUSTFEELDISK", _S, False, "YES"),
    ("DUSTFEELSG", _S, False, "YES"),
    ("DUSTFEELPLANETS", _S, False, "YES"),
    ("DUSTFEELTURB", _S, False, "NO"),
    ("DUSTFLUID", _S, False, "NO"),
    ("DUSTTIMESTEP", _R, False, "0.0"),
    ("MINDT", _R, False, "100.0"),
    ("MAXDT", _R, False, "0.00001"),
    ("WRITEJACOBI", _S, False, "NO"),
    ("WRITEDUSTSYSTEM", _S, False, "YES"),
    ("RMINDUST", _R, False, "0.0"),
    ("RMAXDUST", _R, False, "0.0"),
    ("RESTARTWITHNEWDUST", _S, False, "NO"),
    ("ADDM1", _S, False, "NO"),
    ("ADDM1TOM10", _S, False, "NO"),
    ("TAILOFF", _S, False, "NO"),
    ("DENSITYJUMP", _R, False, "1e-2"),
    ("ZZINTEGRATOR", _S, False, "NO"),
    ("NODTCONSTRAINTBYPCS", _S, False, "YES"),
    ("MDOTTIME", _R, False, "1e5"),
    ("PHOTOEVAPORATION", _S, False, "NO"),
    ("LX", _R, False, "1e30"),
    ("DECINNER", _S, False, "NO"),
    ("INTERPOLATION", _S, False, "TSC"),
    ("DUSTFEEDBACK", _S, False, "NO"),
    ("SFTAPPROX", _S, False, "YES"),
    ("DUSTTOGASMASSRATIO", _R, False, "1e-2"),
    ("DUSTGROWTH", _S, False, "NO"),
    ("REMOVEDUSTFROMPLANETSHILLRADIUS", _S, False, "NO"),
    ("DUSTGROWTHPARAMETER", _R, False, "0.0000001"),
    ("DUSTMASSTAPER", _R, False, "0.0000001"),
    ("DASPECTRATIO", _R, False, "0.05"),
    ("DVISCOSITY", _R, False, "0.0"),
    ("DALPHAVISCOSITY", _R, False, "0.0"),
    ("DFLARINGINDEX", _R, False, "0.0"),
    ("DUSTTOGASDENSITYRATIO", _R, False, "0.01"),
    ("SIZEPART", _R, False, "1e-3"),
    ("DUSTDIFFUSION", _S, False, "NO"),
    ("DUSTDIFFINN", _R, False, "0.0"),
    ("NELSONBOUND", _I, False, "1"),
    ("NELSONBOUNDD", _I, False, "1"),
    ("DENSITYFLOOR", _R, False, "1e-9"),
    ("DSIGMA0", _R, False, "173."),
    ("DSIGMASLOPE", _R, False, "0.0"),
    ("NRAD1D", _I, False, "100"),
    ("RMIN1D", _R, False, "0.01"),
    ("RMAX1D", _R, False, "100.0"),
    ("BOUNDARY1DGRID", _S, False, "T"),
    ("COMPUTECPDMASS", _S, False, "NO"),
    ("CUTDIST", _R, False, "100.0"),
    ("FACTOROPACITIES", _R, False, "1.0"),
    ("SETCONSTANTOPACITY", _S, False, "NO"),
    ("IMPOSEDCONSTANTOPACITY", _R, False, "0.1"),
    ("BM08TRICK", _S, False, "NO"),
    ("EXPONENTIALCUTOFFINDEX", _R, False, "1.0"),
    ("CAVITYTORQUE", _S, False, "NO"),
    ("FRACINT", _R, False, "0.0"),
    ("FRACEXT", _R, False, "0.0"),
    ("COMPARESGANDSUMMATIONTORQUES", _S, False, "NO"),
)

PARAMETERS: dict[str, ParameterSpec] = {
    name: ParameterSpec(name, kind, necessary, default)
    for name, kind, necessary, default in _TABLE
}


def _convert(spec: ParameterSpec, raw: Any) -> Any:
    try:
        if spec.kind is ParamType.REAL:
            return float(raw)
        if spec.kind is ParamType.INT:
            return int(float(raw))
    except (TypeError, ValueError) as exc:
        raise ParameterError(f"invalid value {raw!r} for parameter {spec.name}") from exc
    return str(raw)


@dataclass(frozen=True)
class Parameters:
    """A complete, typed set of run parameters; every declared name has a value."""

    values: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "Parameters":
        """Build a parameter set from name/value pairs, filling in defaults.

        Names are matched without regard to case. Unknown names and missing
        mandatory parameters raise ParameterError.
        """
        given: dict[str, Any] = {}
        for key, raw in values.items():
            name = str(key).upper()
            spec = PARAMETERS.get(name)
            if spec is None:
                raise ParameterError(f"unknown parameter {key!r}")
            given[name] = _convert(spec, raw)
        missing = [
            spec.name for spec in PARAMETERS.values() if spec.necessary and spec.name not in given
        ]
        if missing:
            raise ParameterError("undefined mandatory parameter(s): " + ", ".join(missing))
        resolved = {
            name: given[name] if name in given else _convert(spec, spec.default)
            for name, spec in PARAMETERS.items()
        }
        return cls(resolved)

    def flag(self, name: str) -> bool:
        """Interpret a string parameter as a yes/no switch (true if it starts with Y)."""
        key = name.upper()
        spec = PARAMETERS.get(key)
        if spec is None:
            raise KeyError(name)
        if spec.kind is not ParamType.STRING:
            raise ParameterError(f"parameter {spec.name} is not a string switch")
        return str(self.values[key])[:1] in ("y", "Y")

    def __getitem__(self, name: str) -> Any:
        return self.values[name.upper()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.upper() in self.values

    def __getattr__(self, name: str) -> Any:
        values = self.__dict__.get("values")
        if values is not None and name.upper() in values:
            return values[name.upper()]
        raise AttributeError(name)