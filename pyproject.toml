[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fargodisk"
version = "0.1.0"
description = "Building blocks for polar-grid hydrodynamics of gaseous and dusty protoplanetary discs"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "astrophysics",
    "protoplanetary disc",
    "hydrodynamics",
    "planet migration",
    "self-gravity",
    "polar grid",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Astronomy",
    "Topic :: Scientific/Engineering :: Physics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
fargodisk-units = "fargodisk.units:main"
fargodisk-byteswap = "fargodisk.byteswap:main"

[tool.hatch.build.targets.wheel]
packages = ["fargodisk"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
