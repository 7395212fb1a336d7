"""
Initial conditions, vertical grids and non-dimensional numbers for two-layer
DNS of the cabbeling instability.
"""

from .conditions import (LayerPair, Regime, TwoLayerParameters, UpperLayerConditions,
                         cabbeling, isohaline, stable, two_layer_parameters, unstable,
                         upper_layer_conditions)
from .errors import (CabbelingDNSError, DegenerateRatio, DegenerateStretching,
                     InvalidCoordinate, InvalidParameter, SetupError)
from .grid import generate_grid, grid_stretching
from .nondimensional import NonDimensionalReport, compute, non_dimensional_numbers
from .output import form_filename
from .parameters import REFERENCE, Diffusivities, DomainSpec, GridStretchSpec, Reference
from .profiles import (initial_salinity_profile, initial_temperature_profile, profile,
                       set_two_layer_initial_conditions)
