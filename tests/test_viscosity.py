import numpy as np
import pytest

from fargodisk.grid import Mesh, PolarGrid
from fargodisk.params import Parameters
from fargodisk.profiles import DiskModel
from fargodisk.viscosity import compute_viscous_terms, update_velocities_with_viscosity

NR, NS = 8, 12


def make_model(**extra):
    base = dict(
        DT=1, SIGMA0=1e-3, NINTERM=1, NTOT=1, OUTPUTDIR="out/", NRAD=NR, NSEC=NS,
        RMIN=0.5, RMAX=2.0, ASPECTRATIO=0.05, SIGMASLOPE=1.0, ADIABATICINDEX=1.4,
        VISCOSITY=1e-3,
    )
    base.update(extra)
    params = Parameters.from_mapping(base)
    mesh = Mesh.from_parameters(params)
    return DiskModel(params, mesh), mesh


def fields(mesh, vt_profile):
    vrad = PolarGrid.zeros(NR, NS, "vrad")
    vtheta = PolarGrid.zeros(NR, NS, "vtheta")
    rho = PolarGrid.zeros(NR, NS, "rho")
    vtheta.field[:] = vt_profile(mesh.rmed)[:, None]
    rho.field[:] = 1.0
    return vrad, vtheta, rho, np.zeros((NR, NS))


def test_solid_body_rotation_has_no_stress():
    model, mesh = make_model()
    vrad, vtheta, rho, div = fields(mesh, lambda r: 0.3 * r)
    stress = compute_viscous_terms(model, mesh, vrad, vtheta, rho, div, False)
    assert np.allclose(stress.trp, 0.0, atol=1e-14)
    assert np.allclose(stress.trr, 0.0, atol=1e-14)
    assert np.allclose(stress.tpp, 0.0, atol=1e-14)


def test_keplerian_shear_gives_axisymmetric_stress():
    model, mesh = make_model()
    vrad, vtheta, rho, div = fields(mesh, lambda r: r**-0.5)
    stress = compute_viscous_terms(model, mesh, vrad, vtheta, rho, div, False)
    assert np.all(stress.trp[0] == 0.0)
    assert np.all(stress.trp[1:] != 0.0)
    assert np.allclose(stress.trp, stress.trp[:, :1])


def test_zero_viscosity_gives_zero_stress():
    model, mesh = make_model(VISCOSITY=0.0)
    vrad, vtheta, rho, div = fields(mesh, lambda r: r**-0.5)
    stress = compute_viscous_terms(model, mesh, vrad, vtheta, rho, div, False)
    np.testing.assert_array_equal(stress.trp, np.zeros((NR, NS)))
    assert float(np.abs(stress.trp).max()) == 0.0
    assert float(np.abs(stress.drp).max()) > 0.0


def test_dust_flag_uses_dust_viscosity():
    model, mesh = make_model(VISCOSITY=0.0, DVISCOSITY=1e-3)
    vrad, vtheta, rho, div = fields(mesh, lambda r: r**-0.5)
    gas = compute_viscous_terms(model, mesh, vrad, vtheta, rho, div, False)
    dust = compute_viscous_terms(model, mesh, vrad, vtheta, rho, div, True)
    np.testing.assert_array_equal(gas.trp, np.zeros((NR, NS)))
    assert float(np.abs(gas.trp).max()) == 0.0
    assert float(np.abs(dust.trp).max()) > 0.0


def test_stress_is_linear_in_velocity():
    model, mesh = make_model()
    vrad, vtheta, rho, div = fields(mesh, lambda r: r**-0.5)
    one = compute_viscous_terms(model, mesh, vrad, vtheta, rho, div, False)
    vtheta.data *= 2.0
    two = compute_viscous_terms(model, mesh, vrad, vtheta, rho, div, False)
    assert np.allclose(two.trp, 2.0 * one.trp)


def test_update_leaves_boundaries_and_changes_interior():
    model, mesh = make_model()
    vrad, vtheta, rho, div = fields(mesh, lambda r: r**-0.5)
    before_vt = vtheta.field.copy()
    stress = compute_viscous_terms(model, mesh, vrad, vtheta, rho, div, False)
    update_velocities_with_viscosity(mesh, vrad, vtheta, rho, stress, 0.1)
    assert np.all(vrad.field[0] == 0.0)
    assert np.array_equal(vtheta.field[0], before_vt[0])
    assert np.array_equal(vtheta.field[-1], before_vt[-1])
    assert not np.allclose(vtheta.field[1:-1], before_vt[1:-1])


def test_update_without_stress_changes_nothing():
    model, mesh = make_model(VISCOSITY=0.0)
    vrad, vtheta, rho, div = fields(mesh, lambda r: r**-0.5)
    before = vtheta.field.copy()
    stress = compute_viscous_terms(model, mesh, vrad, vtheta, rho, div, False)
    update_velocities_with_viscosity(mesh, vrad, vtheta, rho, stress, 0.1)
    assert np.array_equal(vtheta.field, before)
    assert np.all(vrad.field == 0.0)


def test_wrong_shape_is_rejected():
    model, mesh = make_model()
    vrad, vtheta, rho, div = fields(mesh, lambda r: r)
    with pytest.raises(ValueError):
        compute_viscous_terms(model, mesh, vrad, vtheta, rho, np.zeros((NR, NS + 1)), False)