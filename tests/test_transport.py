import math

import numpy as np
import pytest

from fargodisk.grid import Mesh, PolarGrid
from fargodisk.transport import (
    Transport,
    advect_shift,
    compute_star_rad,
    compute_star_theta,
)

NR, NS = 8, 16


def make_mesh(nr=NR, ns=NS):
    return Mesh.from_radii(np.linspace(1.0, 2.0, nr + 1), ns, 0.0, 2.0 * math.pi)


def make_grid(mesh, values=None, name="q", full=None):
    grid = PolarGrid.zeros(mesh.nrad, mesh.nsec, name)
    if full is not None:
        grid.data[:] = full
    elif values is not None:
        grid.data[: mesh.nrad] = values
    return grid


def ring_masses(mesh, rho):
    return rho.field.sum(axis=1) * mesh.surf


def test_advect_shift_rolls_each_ring():
    field = np.arange(8.0).reshape(2, 4)
    advect_shift(field, [1, -1])
    assert field.tolist() == [[3.0, 0.0, 1.0, 2.0], [5.0, 6.0, 7.0, 4.0]]


def test_advect_shift_full_turn_is_identity():
    field = np.arange(8.0).reshape(2, 4)
    original = field.copy()
    advect_shift(field, [4, -8])
    assert np.array_equal(field, original)


def test_advect_shift_rejects_too_many_shifts():
    with pytest.raises(ValueError):
        advect_shift(np.zeros((2, 4)), [1, 2, 3])


def test_compute_star_rad_uniform_field():
    mesh = make_mesh()
    rng = np.random.default_rng(1)
    qb = np.full((NR, NS), 2.5)
    vr = rng.normal(size=(NR + 1, NS))
    qs = compute_star_rad(qb, vr, mesh, 0.1)
    assert qs.shape == (NR + 1, NS)
    assert np.allclose(qs[1:NR], 2.5)
    assert np.all(qs[0] == 0.0)
    assert np.all(qs[NR] == 0.0)


def test_compute_star_rad_extrema_take_upwind_cell():
    mesh = make_mesh()
    qb = np.repeat(((-1.0) ** np.arange(NR))[:, None], NS, axis=1)
    vr = np.zeros((NR + 1, NS))
    vr[:, ::2] = 0.3
    vr[:, 1::2] = -0.3
    qs = compute_star_rad(qb, vr, mesh, 0.1)
    assert np.array_equal(qs[1:NR, ::2], qb[:-1, ::2])
    assert np.array_equal(qs[1:NR, 1::2], qb[1:, 1::2])


def test_compute_star_theta_uniform_field():
    mesh = make_mesh()
    rng = np.random.default_rng(2)
    qs = compute_star_theta(np.full((NR, NS), -1.25), rng.normal(size=(NR, NS)), mesh, 0.1)
    assert np.allclose(qs, -1.25)


def test_compute_star_theta_extrema_take_upwind_cell():
    mesh = make_mesh()
    qb = np.repeat(((-1.0) ** np.arange(NS))[None, :], NR, axis=0)
    vt = np.zeros((NR, NS))
    vt[: NR // 2] = 0.2
    vt[NR // 2 :] = -0.2
    qs = compute_star_theta(qb, vt, mesh, 0.1)
    assert np.array_equal(qs[: NR // 2], np.roll(qb, 1, axis=1)[: NR // 2])
    assert np.array_equal(qs[NR // 2 :], qb[NR // 2 :])


def test_uniform_disk_at_rest_stays_at_rest():
    mesh = make_mesh()
    transport = Transport(mesh, omega_frame=0.5)
    rho = make_grid(mesh, np.ones((NR, NS)))
    vrad = make_grid(mesh)
    vtheta = make_grid(mesh)
    lost = transport.step(rho, vrad, vtheta, None, None, 0.1)
    assert lost == 0.0
    assert np.allclose(rho.field, 1.0)
    assert np.all(vrad.field == 0.0)
    assert np.allclose(vtheta.field, 0.0, atol=1e-12)


@pytest.mark.parametrize("fast", [True, False])
def test_integer_orbital_shift_rotates_density(fast):
    mesh = make_mesh()
    dt = 0.1
    rng = np.random.default_rng(3)
    dens = rng.uniform(1.0, 2.0, size=(NR, NS))
    k = np.arange(NR) % 4
    vt0 = (k * mesh.dphi * mesh.rmed / dt)[:, None] * np.ones((1, NS))
    rho = make_grid(mesh, dens)
    vrad = make_grid(mesh)
    vtheta = make_grid(mesh, vt0)
    transport = Transport(mesh, fast=fast)
    transport.step(rho, vrad, vtheta, None, None, dt)
    assert np.array_equal(transport.shifts, k)
    expected = np.array([np.roll(row, shift) for row, shift in zip(dens, k)])
    assert np.allclose(rho.field, expected, rtol=1e-9, atol=1e-12)
    assert np.allclose(vtheta.field, vt0, rtol=1e-9, atol=1e-12)
    assert np.allclose(vrad.field, 0.0)


def test_azimuthal_transport_conserves_ring_masses():
    mesh = make_mesh()
    rng = np.random.default_rng(4)
    rho = make_grid(mesh, rng.uniform(1.0, 2.0, size=(NR, NS)))
    vrad = make_grid(mesh)
    vtheta = make_grid(mesh, rng.normal(1.0, 0.3, size=(NR, NS)))
    before = ring_masses(mesh, rho)
    lost = Transport(mesh).step(rho, vrad, vtheta, None, None, 0.05)
    assert lost == pytest.approx(0.0, abs=1e-14)
    assert np.allclose(ring_masses(mesh, rho), before, rtol=1e-12)


def test_radial_transport_conserves_total_mass_and_reports_inner_ring_change():
    mesh = make_mesh()
    rng = np.random.default_rng(5)
    rho = make_grid(mesh, rng.uniform(1.0, 2.0, size=(NR, NS)))
    vrad = make_grid(mesh, full=rng.normal(0.0, 0.05, size=(NR + 1, NS)))
    vtheta = make_grid(mesh)
    before = ring_masses(mesh, rho)
    transport = Transport(mesh)
    lost = transport.step(rho, vrad, vtheta, None, None, 0.1)
    after = ring_masses(mesh, rho)
    assert after.sum() == pytest.approx(before.sum(), rel=1e-12)
    assert lost == pytest.approx(after[0] - before[0], rel=1e-9, abs=1e-14)
    assert transport.lost_mass == lost


def test_uniform_label_stays_uniform():
    mesh = make_mesh()
    rng = np.random.default_rng(6)
    rho = make_grid(mesh, rng.uniform(1.0, 2.0, size=(NR, NS)))
    vrad = make_grid(mesh, full=rng.normal(0.0, 0.05, size=(NR + 1, NS)))
    vtheta = make_grid(mesh, rng.normal(0.5, 0.1, size=(NR, NS)))
    label = make_grid(mesh, np.full((NR, NS), 0.7))
    Transport(mesh, advect_label=True).step(rho, vrad, vtheta, None, label, 0.1)
    assert np.allclose(label.field, 0.7, rtol=1e-9)


def test_energy_proportional_to_density_stays_proportional():
    mesh = make_mesh()
    rng = np.random.default_rng(7)
    dens = rng.uniform(1.0, 2.0, size=(NR, NS))
    rho = make_grid(mesh, dens)
    energy = make_grid(mesh, 3.0 * dens)
    vrad = make_grid(mesh, full=rng.normal(0.0, 0.05, size=(NR + 1, NS)))
    vtheta = make_grid(mesh, rng.normal(0.5, 0.1, size=(NR, NS)))
    Transport(mesh, energy_equation=True).step(rho, vrad, vtheta, energy, None, 0.1)
    assert np.allclose(energy.field, 3.0 * rho.field, rtol=1e-9)


def test_missing_energy_field_raises():
    mesh = make_mesh()
    rho = make_grid(mesh, np.ones((NR, NS)))
    with pytest.raises(ValueError):
        Transport(mesh, energy_equation=True).step(
            rho, make_grid(mesh), make_grid(mesh), None, None, 0.1
        )


def test_non_positive_time_step_raises():
    mesh = make_mesh()
    rho = make_grid(mesh, np.ones((NR, NS)))
    with pytest.raises(ValueError):
        Transport(mesh).step(rho, make_grid(mesh), make_grid(mesh), None, None, 0.0)


def test_mismatched_field_shape_raises():
    mesh = make_mesh()
    with pytest.raises(ValueError):
        Transport(mesh).step(
            np.ones((NR, NS + 1)), make_grid(mesh), make_grid(mesh), None, None, 0.1
        )


def test_dust_open_inner_loss_matches_accretion_rate():
    mesh = make_mesh()
    rng = np.random.default_rng(8)
    rho = make_grid(mesh, rng.uniform(0.5, 1.0, size=(NR, NS)))
    rhog = make_grid(mesh, np.ones((NR, NS)))
    vrad = make_grid(mesh, full=-np.abs(rng.normal(0.0, 0.05, size=(NR + 1, NS))))
    vtheta = make_grid(mesh)
    before = ring_masses(mesh, rho)
    dt = 0.1
    transport = Transport(mesh, open_inner=True)
    lost = transport.step_dust(rho, rhog, vrad, vtheta, None, dt)
    after = ring_masses(mesh, rho)
    assert lost == pytest.approx(-dt * transport.acc_rate_dust, rel=1e-12)
    assert lost == pytest.approx(after[0] - before[0], rel=1e-9)
    assert after.sum() == pytest.approx(before.sum(), rel=1e-12)


def test_dust_closed_inner_reports_no_loss():
    mesh = make_mesh()
    rng = np.random.default_rng(9)
    rho = make_grid(mesh, rng.uniform(0.5, 1.0, size=(NR, NS)))
    rhog = make_grid(mesh, np.ones((NR, NS)))
    vrad = make_grid(mesh, full=rng.normal(0.0, 0.05, size=(NR + 1, NS)))
    vtheta = make_grid(mesh, rng.normal(0.5, 0.1, size=(NR, NS)))
    before = ring_masses(mesh, rho)
    transport = Transport(mesh)
    lost = transport.step_dust(rho, rhog, vrad, vtheta, None, 0.1)
    assert lost == 0.0
    assert transport.acc_rate_dust == 0.0
    assert ring_masses(mesh, rho).sum() == pytest.approx(before.sum(), rel=1e-12)