"""Conversion between physical (SI) values and dimensionless code units."""

from __future__ import annotations

import math
import sys
from typing import Iterator, Sequence

SOLAR_MASS = 2.0e30  # kg
ASTRONOMICAL_UNIT = 1.5e11  # m
YEAR = 3.1558e7  # s
REFERENCE_TEMPERATURE = 2.5797e5  # K, such that R/mu = 1


def _unit(nm: float, nl: float, nt: float, nu: float) -> float:
    return (
        math.pow(SOLAR_MASS, nm)
        * math.pow(ASTRONOMICAL_UNIT, nl)
        * math.pow(YEAR / 2.0 / math.pi, nt)
        * math.pow(REFERENCE_TEMPERATURE, nu)
    )


def to_code_units(value: float, nm: float, nl: float, nt: float, nu: float) -> float:
    """Convert a value of dimension M^nm L^nl T^nt K^nu from SI to code units."""
    return value / _unit(nm, nl, nt, nu)


def to_physical_units(value: float, nm: float, nl: float, nt: float, nu: float) -> float:
    """Convert a value of dimension M^nm L^nl T^nt K^nu from code units to SI."""
    return value * _unit(nm, nl, nt, nu)


def _answers(args: Sequence[str]) -> Iterator[str]:
    yield from args
    while True:
        yield input().strip()


def main(argv: Sequence[str] | None = None) -> int:
    """Convert one value, reading the direction, value and exponents from argv or stdin."""
    args = list(sys.argv[1:] if argv is None else argv)
    answers = _answers(args)
    supplied = len(args)
    asked = 0

    def ask(prompt: str) -> str:
        nonlocal asked
        if asked >= supplied:
            print(prompt)
        asked += 1
        return next(answers)

    direction = ask("Convert to code units or to physical units? Type A or D...")[:1]
    if direction not in ("A", "D"):
        print("You must type an A or a D. Try again.")
        return 0
    try:
        value = float(ask("Value to convert?"))
        print(
            "Dimension of the quantity: M^nm x L^nl x T^nt x U^nu,\n"
            "with M=mass, L=length, T=time and U=temperature"
            if asked > supplied
            else "",
            end="\n" if asked > supplied else "",
        )
        nm = float(ask("value of nm?"))
        nl = float(ask("value of nl?"))
        nt = float(ask("value of nt?"))
        nu = float(ask("value of nu?"))
    except ValueError as exc:
        print(f"invalid number: {exc}", file=sys.stderr)
        return 1
    if direction == "A":
        result = to_code_units(value, nm, nl, nt, nu)
        print("The dimensionless value is:")
        print(f"adimvalue = {result:g}")
    else:
        result = to_physical_units(value, nm, nl, nt, nu)
        print("The dimensional value is:")
        print(
            f"dimvalue = {result:.2e} in kg^{nm:.1g} m^{nl:.1g} s^{nt:.1g} kelvin^{nu:.1g}"
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())