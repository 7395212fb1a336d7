import logging

import h5py
import numpy as np
import pytest

pytest.importorskip("dedalus")

from cabbeling_dns import conditions
from cabbeling_dns.conditions import two_layer_parameters
from cabbeling_dns.dns import DNS
from cabbeling_dns.output import NON_DIMENSIONAL_GROUP, read_non_dimensional_numbers
from cabbeling_dns.parameters import DomainSpec, Diffusivities, Reference
from cabbeling_dns.profiles import set_two_layer_initial_conditions
from cabbeling_dns.simulation import DNS_simulation_setup, run


@pytest.fixture
def small_model():
    domain = DomainSpec(Lx=0.1, Ly=0.1, Lz=1, Nx=4, Ny=4, Nz=16)
    return DNS(domain, Diffusivities(nu=1e-4, kappa=1e-5))


def test_initial_conditions_on_model_grid(small_model):
    params = two_layer_parameters(conditions.cabbeling(34.6, -1.5))
    set_two_layer_initial_conditions(small_model, params, interface_thickness=10,
                                     perturb_salinity=False)
    x, y, z = small_model.grids
    S = small_model.tracers['S']
    S.change_scales(1)
    expected = 34.65 - 0.05 * np.tanh(10 * (z + 0.5))
    np.testing.assert_allclose(S['g'], np.broadcast_to(expected, S['g'].shape))


def test_z_nodes(small_model):
    z = small_model.z_nodes()
    assert len(z) == 16
    assert np.all(np.diff(z) > 0)
    assert -1 < z[0] and z[-1] < 0
    np.testing.assert_allclose(z, np.ravel(small_model.grids[2]))


def test_simulation_setup_writes_artifact(small_model, tmp_path):
    reference = Reference(output_dir=tmp_path)
    ic = conditions.stable(34.8, 1.0)
    set_two_layer_initial_conditions(small_model, two_layer_parameters(ic), interface_thickness=10)
    simulation = DNS_simulation_setup(small_model, 1e-3, 1e-2, ic, reference=reference)
    assert simulation.filename == tmp_path / 'stable.jld2'
    assert simulation.report['Le'] == 1
    simulation.writer.process(0, 0.0, 1e-3)
    with h5py.File(simulation.filename, 'r') as file:
        assert file['tasks/S'].shape == (1, 4, 4, 16)
    assert read_non_dimensional_numbers(simulation.filename)['Pr'] == pytest.approx(10)


def test_run_writes_snapshots_and_logs_progress(small_model, tmp_path, caplog):
    caplog.set_level(logging.INFO, logger='cabbeling_dns.simulation')
    reference = Reference(output_dir=tmp_path)
    ic = conditions.stable(34.8, 1.0)
    set_two_layer_initial_conditions(small_model, two_layer_parameters(ic), interface_thickness=10)
    simulation = DNS_simulation_setup(small_model, 1e-3, 1.0, ic, output_iter=2, progress_iter=3,
                                      reference=reference)
    simulation.solver.stop_iteration = 6
    run(simulation)
    assert simulation.solver.iteration == 6
    with h5py.File(simulation.filename, 'r') as file:
        np.testing.assert_array_equal(file['scales/iteration'][:], [0, 2, 4, 6])
        assert file['tasks/T'].shape == (4, 4, 4, 16)
        assert file.attrs['writes'] == 4
        assert NON_DIMENSIONAL_GROUP in file
    assert read_non_dimensional_numbers(simulation.filename)['Sc'] == pytest.approx(10)
    progress = [record.getMessage() for record in caplog.records if 'advective CFL' in record.getMessage()]
    assert len(progress) == 2
    assert progress[-1].startswith('i:      6')
