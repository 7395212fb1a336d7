"""
Output artifact of a two-layer run.

Each regime writes to a single HDF5 file named after it (stable.jld2,
cabbeling.jld2, unstable.jld2, isohaline.jld2) holding periodic snapshots of
the tracers and the non-dimensional numbers of the run.
"""

import pathlib
from dataclasses import dataclass

import h5py
import numpy as np

from .errors import InvalidParameter, SetupError
from .nondimensional import KEYS, NonDimensionalReport
from .parameters import REFERENCE

import logging
logger = logging.getLogger(__name__)

EXTENSION = '.jld2'
NON_DIMENSIONAL_GROUP = 'Non_dimensional_numbers'


def form_filename(conditions, directory=None, savefile=None):
    """Path of the output file, from the regime unless `savefile` is given."""
    if directory is None:
        directory = REFERENCE.output_dir
    if savefile is None:
        savefile = conditions.regime.stem
    return pathlib.Path(directory).joinpath(savefile + EXTENSION)


@dataclass(frozen=True)
class IterationInterval:
    """Schedule that fires every `interval` iterations, starting at iteration 0."""
    interval: int

    def __post_init__(self):
        if self.interval < 1:
            raise InvalidParameter("interval must be at least 1, got %r" %self.interval)

    def __call__(self, iteration):
        return iteration % self.interval == 0


@dataclass(frozen=True)
class TimeStepPolicy:
    """Bounds for the adaptive timestep, recalculated every `cadence` iterations."""
    initial_dt: float
    cfl: float = 0.75
    diffusive_cfl: float = 0.75
    max_change: float = 1.2
    max_dt: float = 1e-2
    cadence: int = 10

    def __post_init__(self):
        if not 0 < self.initial_dt <= self.max_dt:
            raise InvalidParameter("initial_dt must lie in (0, max_dt], got %r" %self.initial_dt)
        if self.max_change < 1:
            raise InvalidParameter("max_change must be at least 1, got %r" %self.max_change)

    def diffusive_limit(self, dz_min, diffusivities):
        """Largest stable timestep for diffusion across the finest cell."""
        κ = max(diffusivities.nu, *diffusivities.kappa.values())
        return self.diffusive_cfl * dz_min**2 / κ

    def bounded_max_dt(self, dz_min, diffusivities):
        return min(self.max_dt, self.diffusive_limit(dz_min, diffusivities))


class OutputWriter:
    """
    Writes snapshots of tasks to an HDF5 file.

    Parameters
    ----------
    filename : path-like
        Output file
    outputs : dict
        Task names mapped to callables returning the full (gathered) array
    schedule : IterationInterval
        Iterations at which to write
    overwrite_existing : bool (default: True)
        Truncate an existing file at setup
    write : bool (default: True)
        Whether this process writes (rank 0 only under MPI)
    """

    def __init__(self, filename, outputs, schedule, overwrite_existing=True, write=True):
        self.filename = pathlib.Path(filename)
        self.outputs = dict(outputs)
        self.schedule = schedule
        self.write = write
        self.write_num = 0
        if not self.write:
            return
        mode = 'w' if overwrite_existing else 'a'
        try:
            self.filename.parent.mkdir(parents=True, exist_ok=True)
            with h5py.File(self.filename, mode) as file:
                self.setup_file(file)
                self.write_num = file.attrs['writes']
        except OSError as error:
            raise SetupError("Could not create output file %s" %self.filename) from error
        logger.info('Output file: %s' %self.filename)

    def setup_file(self, file):
        if 'scales' in file:
            return
        file.attrs['writes'] = 0
        scale_group = file.create_group('scales')
        # Start time scales with shape=(0,) to chunk across writes
        scale_group.create_dataset(name='sim_time', shape=(0,), maxshape=(None,), dtype=np.float64)
        scale_group.create_dataset(name='timestep', shape=(0,), maxshape=(None,), dtype=np.float64)
        scale_group.create_dataset(name='iteration', shape=(0,), maxshape=(None,), dtype=np.int64)
        scale_group.create_dataset(name='write_number', shape=(0,), maxshape=(None,), dtype=np.int64)
        file.create_group('tasks')

    def process(self, iteration, sim_time, timestep):
        """Write all tasks if the schedule fires at `iteration`."""
        if not self.schedule(iteration):
            return False
        # Gathering is collective, so every process evaluates the tasks
        data = {name: np.asarray(task()) for name, task in self.outputs.items()}
        if not self.write:
            return True
        with h5py.File(self.filename, 'a') as file:
            index = self.write_num
            for name, value in [('sim_time', sim_time), ('timestep', timestep),
                                ('iteration', iteration), ('write_number', index + 1)]:
                dset = file['scales'][name]
                dset.resize(index + 1, axis=0)
                dset[index] = value
            tasks = file['tasks']
            for name, array in data.items():
                if name not in tasks:
                    tasks.create_dataset(name=name, shape=(0,) + array.shape,
                                         maxshape=(None,) + array.shape, dtype=array.dtype)
                dset = tasks[name]
                dset.resize(index + 1, axis=0)
                dset[index] = array
            self.write_num = index + 1
            file.attrs['writes'] = self.write_num
        return True


def write_non_dimensional_numbers(filename, report):
    """Append the non-dimensional numbers to the output file."""
    try:
        with h5py.File(filename, 'a') as file:
            if NON_DIMENSIONAL_GROUP in file:
                del file[NON_DIMENSIONAL_GROUP]
            group = file.create_group(NON_DIMENSIONAL_GROUP)
            for key, value in report.items():
                group[key] = value
    except OSError as error:
        raise SetupError("Could not write non-dimensional numbers to %s" %filename) from error
    logger.info('Non-dimensional numbers: %s' %', '.join('%s = %.3e' %item for item in report.items()))


def read_non_dimensional_numbers(filename):
    """Non-dimensional numbers stored in an output file."""
    with h5py.File(filename, 'r') as file:
        group = file[NON_DIMENSIONAL_GROUP]
        return NonDimensionalReport(*(float(group[key][()]) for key in KEYS))
