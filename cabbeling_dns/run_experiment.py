"""
Run a two-layer DNS.

Usage:
    run_experiment.py <regime> [options]

Arguments:
    <regime>                One of stable, cabbeling, unstable, isohaline

Options:
    --salinity=<S>          Upper layer salinity, ignored for isohaline [default: 34.6]
    --temperature=<T>       Upper layer temperature [default: -1.5]
    --stop-time=<t>         Simulation stop time [default: 60]
    --dt=<dt>               Initial timestep [default: 1e-4]
    --output=<dir>          Output directory [default: data/simulations]
    --savefile=<name>       Output file stem, the regime name if omitted
    --no-perturbation       Do not perturb the upper layer salinity

"""

import dataclasses
import pathlib

from . import parameters as param
from .conditions import two_layer_parameters, upper_layer_conditions
from .dns import DNS
from .profiles import set_two_layer_initial_conditions
from .simulation import DNS_simulation_setup, run

import logging
logger = logging.getLogger(__name__)


def main(regime, S, T, stop_time, dt, output, savefile=None, perturb_salinity=True):
    reference = dataclasses.replace(param.REFERENCE, output_dir=pathlib.Path(output))
    initial_conditions = upper_layer_conditions(regime, S, T, reference=reference)
    params = two_layer_parameters(initial_conditions, reference=reference)
    logger.info('Upper layer: S = %.3f, T = %.3f (%s)' %(params.S_upper, params.T_upper, params.regime.stem))

    model = DNS(param.domain_extent, param.SO_diffusivities, reference=reference,
                timestepper=param.timestepper)
    set_two_layer_initial_conditions(model, params,
                                     interface_location=param.interface_location,
                                     interface_thickness=param.interface_thickness,
                                     perturb_salinity=perturb_salinity,
                                     salinity_perturbation_width=param.salinity_perturbation_width)
    simulation = DNS_simulation_setup(model, dt, stop_time, initial_conditions,
                                      output_iter=param.output_iter,
                                      progress_iter=param.progress_iter,
                                      savefile=savefile, reference=reference,
                                      **param.CFL)
    return run(simulation)


def cli(argv=None):
    from docopt import docopt
    from dedalus.tools import logging

    args = docopt(__doc__, argv=argv)
    main(args['<regime>'],
         float(args['--salinity']),
         float(args['--temperature']),
         float(args['--stop-time']),
         float(args['--dt']),
         args['--output'],
         savefile=args['--savefile'],
         perturb_salinity=not args['--no-perturbation'])


if __name__ == "__main__":
    cli()
