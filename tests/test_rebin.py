import math

import numpy as np
import pytest

from fargodisk.grid import Mesh
from fargodisk.rebin import (
    REBIN_KINDS,
    PreviousMesh,
    check_rebin,
    read_previous_dimensions,
    rebin_field,
    rebin_needed,
)

TWO_PI = 2.0 * math.pi


@pytest.fixture
def previous():
    return PreviousMesh(np.linspace(1.0, 2.0, 9), 8)


@pytest.fixture
def same_mesh():
    return Mesh.from_radii(np.linspace(1.0, 2.0, 9), 8, 0.0, TWO_PI)


@pytest.fixture
def finer_mesh():
    return Mesh.from_radii(np.linspace(0.9, 2.2, 14), 12, 0.0, TWO_PI)


def test_rebin_needed(previous, same_mesh, finer_mesh):
    assert rebin_needed(previous, same_mesh) is False
    assert rebin_needed(previous, finer_mesh) is True
    assert rebin_needed(None, same_mesh) is True
    assert rebin_needed(PreviousMesh(np.linspace(1.0, 2.0, 9), 16), same_mesh) is True
    shifted = Mesh.from_radii(np.linspace(1.0, 2.0, 9) * (1 + 1e-6), 8, 0.0, TWO_PI)
    assert rebin_needed(previous, shifted) is True


@pytest.mark.parametrize("kind", REBIN_KINDS)
def test_identity_on_same_mesh(previous, same_mesh, kind):
    old = np.random.default_rng(1).random((8, 8))
    np.testing.assert_allclose(rebin_field(old, previous, same_mesh, kind), old, atol=1e-12)


@pytest.mark.parametrize("kind", REBIN_KINDS)
def test_constant_field_stays_constant(previous, finer_mesh, kind):
    new = rebin_field(np.full(64, 2.5), previous, finer_mesh, kind)
    assert new.shape == (finer_mesh.nrad, finer_mesh.nsec)
    np.testing.assert_allclose(new, 2.5)


def test_radially_linear_field_is_interpolated_exactly(previous, finer_mesh):
    old = np.repeat(previous.rmed[:, None], previous.nsec, axis=1)
    new = rebin_field(old, previous, finer_mesh, "dens")
    expected = np.clip(finer_mesh.rmed, previous.rmed[0], previous.rmed[-1])
    np.testing.assert_allclose(new, np.repeat(expected[:, None], finer_mesh.nsec, axis=1))


def test_bad_arguments(previous, same_mesh):
    with pytest.raises(ValueError):
        rebin_field(np.zeros(64), previous, same_mesh, "pressure")
    with pytest.raises(ValueError):
        rebin_field(np.zeros(10), previous, same_mesh, "dens")


def test_read_previous_dimensions(tmp_path):
    assert read_previous_dimensions(tmp_path) is None
    (tmp_path / "dims.dat").write_text("0 0 0 0 0.0 0 4 8\n")
    radii = np.linspace(1.0, 3.0, 5)
    (tmp_path / "used_rad.dat").write_text("\n".join(f"{r:.17g}" for r in radii) + "\n")
    prev = read_previous_dimensions(tmp_path)
    assert prev.nrad == 4
    assert prev.nsec == 8
    np.testing.assert_array_equal(prev.radii, radii)


def test_check_rebin_rewrites_files(tmp_path, previous, finer_mesh):
    path = tmp_path / "gasdens3.dat"
    np.full(64, 1.25).tofile(path)
    rewritten = check_rebin(tmp_path, 3, previous, finer_mesh)
    assert rewritten == [path]
    data = np.fromfile(path, dtype=np.float64)
    assert data.size == finer_mesh.nrad * finer_mesh.nsec
    np.testing.assert_allclose(data, 1.25)


def test_check_rebin_leaves_matching_mesh_alone(tmp_path, previous, same_mesh):
    path = tmp_path / "gasdens3.dat"
    np.arange(64.0).tofile(path)
    assert check_rebin(tmp_path, 3, previous, same_mesh) == []
    np.testing.assert_array_equal(np.fromfile(path), np.arange(64.0))


def test_check_rebin_without_previous_mesh(tmp_path, same_mesh):
    with pytest.raises(ValueError):
        check_rebin(tmp_path, 0, None, same_mesh)