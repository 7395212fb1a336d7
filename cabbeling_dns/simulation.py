"""
Simulation setup and main loop for the two-layer DNS.
"""

import time

import numpy as np
import dedalus.public as d3
from dedalus.tools.parallel import Sync

from .conditions import two_layer_parameters
from .grid import spacings
from .nondimensional import experiment_numbers
from .output import (IterationInterval, OutputWriter, TimeStepPolicy, form_filename,
                     write_non_dimensional_numbers)
from .parameters import REFERENCE

import logging
logger = logging.getLogger(__name__)


class Simulation:
    """Solver of a two-layer DNS with its timestep control and output."""

    def __init__(self, model, solver, CFL, flow, writer, policy, progress, dz_min, filename, report):
        self.model = model
        self.solver = solver
        self.CFL = CFL
        self.flow = flow
        self.writer = writer
        self.policy = policy
        self.progress = progress
        self.dz_min = dz_min
        self.filename = filename
        self.report = report


def gather(field):
    def task():
        field.change_scales(1)
        return field.allgather_data('g')
    return task


def DNS_simulation_setup(model, dt, stop_time, initial_conditions,
                         cfl=0.75, diffusive_cfl=0.75, max_change=1.2, max_dt=1e-2, cadence=10,
                         output_iter=50, progress_iter=50, directory=None, savefile=None,
                         reference=REFERENCE, eos=None):
    """
    Setup a DNS of `model` from upper layer `initial_conditions`.

    The output file is named after the regime of the initial conditions
    (or `savefile`) and receives snapshots of S and T every `output_iter`
    iterations. The non-dimensional numbers are written to it once, before
    the run starts.
    """
    params = two_layer_parameters(initial_conditions, reference=reference)
    if directory is None:
        directory = reference.output_dir

    # Solver
    solver = model.build_solver()
    solver.stop_sim_time = stop_time
    logger.info('Solver built')

    # Timestep adjustments
    policy = TimeStepPolicy(initial_dt=dt, cfl=cfl, diffusive_cfl=diffusive_cfl,
                            max_change=max_change, max_dt=max_dt, cadence=cadence)
    dz_min = spacings(model.z_nodes()).min()
    CFL = d3.CFL(solver, initial_dt=policy.initial_dt, cadence=policy.cadence, safety=policy.cfl,
                 max_change=policy.max_change, max_dt=policy.bounded_max_dt(dz_min, model.closure),
                 threshold=0.05)
    CFL.add_velocity(model.velocity)

    # Output
    filename = form_filename(initial_conditions, directory=directory, savefile=savefile)
    report = experiment_numbers(model.closure, params, eos=eos, reference=reference)
    write = (model.comm.rank == 0)
    outputs = {name: gather(field) for name, field in model.tracers.items()}
    with Sync(model.comm):
        writer = OutputWriter(filename, outputs, IterationInterval(output_iter),
                              overwrite_existing=True, write=write)
        if write:
            write_non_dimensional_numbers(filename, report)

    # Flow properties
    u = model.velocity
    flow = d3.GlobalFlowProperty(solver, cadence=progress_iter)
    flow.add_property(np.sqrt(u@u), name='|u|')

    return Simulation(model, solver, CFL, flow, writer, policy, IterationInterval(progress_iter),
                      dz_min, filename, report)


def simulation_progress(simulation, dt, wall_time):
    """Log iteration, times, timestep and CFL numbers."""
    solver = simulation.solver
    closure = simulation.model.closure
    κ = max(closure.nu, *closure.kappa.values())
    advective_CFL = dt * simulation.flow.max('|u|') / simulation.dz_min
    diffusive_CFL = dt * κ / simulation.dz_min**2
    logger.info('i: %6i, sim time: %1.3f, wall time: %.1f s, dt: %1.4e, advective CFL: %.2e, diffusive CFL: %.2e'
                %(solver.iteration, solver.sim_time, wall_time, dt, advective_CFL, diffusive_CFL))


def run(simulation):
    """Main loop."""
    solver = simulation.solver
    writer = simulation.writer
    dt = simulation.policy.initial_dt
    writer.process(solver.iteration, solver.sim_time, dt)
    start_run_time = time.time()
    try:
        logger.info('Starting loop')
        while solver.proceed:
            dt = simulation.CFL.compute_timestep()
            solver.step(dt)
            writer.process(solver.iteration, solver.sim_time, dt)
            if simulation.progress(solver.iteration):
                simulation_progress(simulation, dt, time.time() - start_run_time)
    except Exception:
        logger.error('Exception raised, triggering end of main loop.')
        raise
    finally:
        end_run_time = time.time()
        logger.info('Iterations: %i' %solver.iteration)
        logger.info('Sim end time: %f' %solver.sim_time)
        logger.info('Run time: %.2f sec' %(end_run_time-start_run_time))
        logger.info('Run time: %f cpu-hr' %((end_run_time-start_run_time)/60/60*simulation.model.comm.size))
    return simulation
