import pytest

from fargodisk.params import Parameters, ParameterError, PARAMETERS

REQUIRED = {
    "DT": "0.5",
    "SIGMA0": 6e-4,
    "NINTERM": "20",
    "NTOT": 400,
    "OUTPUTDIR": "out/",
    "NRAD": 128,
    "NSEC": "384.0",
    "RMIN": 0.4,
    "RMAX": 2.5,
    "ASPECTRATIO": 0.05,
    "SIGMASLOPE": 0.5,
    "ADIABATICINDEX": 1.4,
}


def make(**extra):
    values = dict(REQUIRED)
    values.update(extra)
    return Parameters.from_mapping(values)


def test_given_values_are_typed():
    params = make()
    assert params["DT"] == 0.5
    assert params["NINTERM"] == 20
    assert isinstance(params["NINTERM"], int)
    assert params["NSEC"] == 384
    assert params["OUTPUTDIR"] == "out/"


def test_defaults_fill_in():
    params = make()
    assert params["TRANSPORT"] == "FAST"
    assert params["NBTURBMODES"] == 50
    assert params["PMAX"] == pytest.approx(6.2831853071795864)
    assert params["INTERPOLATION"] == "TSC"
    assert set(params.values) == set(PARAMETERS)


def test_names_are_case_insensitive():
    params = make(flaringindex="0.25")
    assert params["FLARINGINDEX"] == 0.25
    assert params.flaringindex == 0.25
    assert "flaringindex" in params


def test_missing_mandatory_raises():
    values = dict(REQUIRED)
    del values["NRAD"]
    with pytest.raises(ParameterError, match="NRAD"):
        Parameters.from_mapping(values)


def test_unknown_parameter_raises():
    with pytest.raises(ParameterError):
        make(NOSUCHTHING="1")


def test_bad_number_raises():
    with pytest.raises(ParameterError):
        make(VISCOSITY="lots")


def test_flags():
    params = make(SELFGRAVITY="yes", ENERGYEQUATION="No")
    assert params.flag("DISK") is True
    assert params.flag("selfgravity") is True
    assert params.flag("ENERGYEQUATION") is False
    assert params.flag("WRITEENERGY") is False


def test_flag_on_numeric_raises():
    params = make()
    with pytest.raises(ParameterError):
        params.flag("NRAD")
    with pytest.raises(KeyError):
        params.flag("NOSUCHTHING")


def test_missing_attribute_raises():
    params = make()
    assert hasattr(params, "not_a_parameter") is False
    assert getattr(params, "not_a_parameter", "fallback") == "fallback"
    assert getattr(params, "aspectratio", "fallback") == 0.05