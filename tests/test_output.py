import h5py
import numpy as np
import pytest

from cabbeling_dns import conditions
from cabbeling_dns.errors import InvalidParameter, SetupError
from cabbeling_dns.nondimensional import compute
from cabbeling_dns.output import (IterationInterval, OutputWriter, TimeStepPolicy, form_filename,
                                  read_non_dimensional_numbers, write_non_dimensional_numbers)
from cabbeling_dns.parameters import SO_diffusivities


@pytest.mark.parametrize("ic, name", [(conditions.stable(34.8, 1.0), 'stable.jld2'),
                                      (conditions.cabbeling(34.6, -1.5), 'cabbeling.jld2'),
                                      (conditions.unstable(34.5, 2.0), 'unstable.jld2'),
                                      (conditions.isohaline(-1.5), 'isohaline.jld2')])
def test_filename_from_regime(ic, name, tmp_path):
    assert form_filename(ic, directory=tmp_path) == tmp_path / name


def test_default_directory():
    path = form_filename(conditions.stable(34.8, 1.0))
    assert path.name == 'stable.jld2'
    assert path.parent.name == 'simulations'


def test_savefile_overrides_regime(tmp_path):
    path = form_filename(conditions.stable(34.8, 1.0), directory=tmp_path, savefile='run_01')
    assert path == tmp_path / 'run_01.jld2'


def test_iteration_interval():
    schedule = IterationInterval(50)
    assert [i for i in range(201) if schedule(i)] == [0, 50, 100, 150, 200]
    with pytest.raises(InvalidParameter):
        IterationInterval(0)


def test_time_step_policy():
    policy = TimeStepPolicy(initial_dt=1e-3)
    assert policy.max_dt == 1e-2
    assert policy.max_change == 1.2
    assert policy.cadence == 10
    # ν dominates the Southern Ocean diffusivities
    assert policy.diffusive_limit(1e-3, SO_diffusivities) == pytest.approx(0.75 * 1e-6 / 1e-6)
    assert policy.bounded_max_dt(1e-3, SO_diffusivities) == 1e-2
    assert policy.bounded_max_dt(1e-5, SO_diffusivities) == pytest.approx(0.75e-4)


@pytest.mark.parametrize("kw", [dict(initial_dt=0), dict(initial_dt=1.0),
                                dict(initial_dt=1e-3, max_change=0.5)])
def test_invalid_time_step_policy(kw):
    with pytest.raises(InvalidParameter):
        TimeStepPolicy(**kw)


def test_writer_snapshots(tmp_path):
    filename = tmp_path / 'out' / 'cabbeling.jld2'
    state = {'S': np.zeros((2, 2, 3)), 'T': np.ones((2, 2, 3))}
    outputs = {name: (lambda name=name: state[name]) for name in state}
    writer = OutputWriter(filename, outputs, IterationInterval(2))
    for iteration in range(5):
        state['S'] = state['S'] + 1
        writer.process(iteration, 0.1 * iteration, 0.1)
    with h5py.File(filename, 'r') as file:
        assert file.attrs['writes'] == 3
        np.testing.assert_array_equal(file['scales/iteration'][:], [0, 2, 4])
        np.testing.assert_allclose(file['scales/sim_time'][:], [0, 0.2, 0.4])
        np.testing.assert_array_equal(file['scales/write_number'][:], [1, 2, 3])
        assert file['tasks/S'].shape == (3, 2, 2, 3)
        np.testing.assert_array_equal(file['tasks/S'][:, 0, 0, 0], [1, 3, 5])
        np.testing.assert_array_equal(file['tasks/T'][2], 1)


def test_writer_overwrites_existing(tmp_path):
    filename = tmp_path / 'stable.jld2'
    outputs = {'S': lambda: np.zeros(3)}
    writer = OutputWriter(filename, outputs, IterationInterval(1))
    writer.process(0, 0, 0.1)
    writer = OutputWriter(filename, outputs, IterationInterval(1), overwrite_existing=True)
    with h5py.File(filename, 'r') as file:
        assert file.attrs['writes'] == 0
        assert 'S' not in file['tasks']


def test_writer_appends(tmp_path):
    filename = tmp_path / 'stable.jld2'
    outputs = {'S': lambda: np.zeros(3)}
    OutputWriter(filename, outputs, IterationInterval(1)).process(0, 0, 0.1)
    writer = OutputWriter(filename, outputs, IterationInterval(1), overwrite_existing=False)
    writer.process(1, 0.1, 0.1)
    with h5py.File(filename, 'r') as file:
        assert file['tasks/S'].shape == (2, 3)


def test_non_writing_process_leaves_no_file(tmp_path):
    filename = tmp_path / 'stable.jld2'
    calls = []
    writer = OutputWriter(filename, {'S': lambda: calls.append(1) or np.zeros(3)},
                          IterationInterval(1), write=False)
    assert writer.process(0, 0, 0.1)
    assert calls == [1]
    assert not filename.exists()


def test_non_dimensional_numbers_in_artifact(tmp_path):
    filename = tmp_path / 'cabbeling.jld2'
    OutputWriter(filename, {'S': lambda: np.zeros(3)}, IterationInterval(50))
    report = compute(1e-6, 1e-9, 1e-7, 5e-5, 7.5e-4, -2.0, -0.1)
    write_non_dimensional_numbers(filename, report)
    write_non_dimensional_numbers(filename, report)
    assert dict(read_non_dimensional_numbers(filename)) == pytest.approx(dict(report))
    with h5py.File(filename, 'r') as file:
        assert set(file['Non_dimensional_numbers']) == {'Pr', 'Sc', 'Le', 'Ra_ρ'}
        assert 'scales' in file


def test_non_dimensional_numbers_setup_error(tmp_path):
    report = compute(1e-6, 1e-9, 1e-7, 5e-5, 7.5e-4, -2.0, -0.1)
    with pytest.raises(SetupError):
        write_non_dimensional_numbers(tmp_path / 'missing' / 'stable.jld2', report)
