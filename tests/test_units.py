import pytest

from fargodisk.units import main, to_code_units, to_physical_units


def test_solar_mass_is_unit_mass():
    assert to_code_units(2.0e30, 1, 0, 0, 0) == pytest.approx(1.0)


def test_au_is_unit_length():
    assert to_physical_units(1.0, 0, 1, 0, 0) == pytest.approx(1.5e11)


@pytest.mark.parametrize("dims", [(1, 0, 0, 0), (0, 1, -1, 0), (1, -2, 0, 0), (0, 0, 0, 1)])
def test_round_trip(dims):
    value = 3.7
    assert to_code_units(to_physical_units(value, *dims), *dims) == pytest.approx(value)


def test_dimensionless_value_unchanged():
    assert to_code_units(42.0, 0, 0, 0, 0) == 42.0


def test_time_unit_is_year_over_two_pi():
    year = to_physical_units(2.0 * 3.141592653589793, 0, 0, 1, 0)
    assert year == pytest.approx(3.1558e7)


def test_main_to_code_units(capsys):
    assert main(["A", "2e30", "1", "0", "0", "0"]) == 0
    assert "adimvalue = 1" in capsys.readouterr().out


def test_main_to_physical_units(capsys):
    assert main(["D", "1", "1", "0", "0", "0"]) == 0
    assert "dimvalue = 2.00e+30 in kg^1 m^0 s^0 kelvin^0" in capsys.readouterr().out


def test_main_rejects_bad_direction(capsys):
    assert main(["X"]) == 0
    assert "A or a D" in capsys.readouterr().out


def test_main_rejects_bad_number():
    assert main(["A", "abc", "1", "0", "0", "0"]) == 1