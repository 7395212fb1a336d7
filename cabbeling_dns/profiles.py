"""
Initial salinity and temperature profiles for the two-layer model.

The layers are joined by a hyperbolic tangent in the vertical so that the
initial fields are smooth; discontinuities crash the DNS. The transition is
centred at z = -interface_location and `interface_thickness` sets its
steepness. The salinity in the upper layer can be perturbed with a Gaussian
bump to seed the instability.

Every function here is evaluated pointwise and works on scalars or arrays.
"""

import numpy as np

from .errors import InvalidCoordinate

import logging
logger = logging.getLogger(__name__)


def check_coordinate(z):
    z = np.asarray(z, dtype=np.float64)
    if not np.all(np.isfinite(z)):
        raise InvalidCoordinate("Profiles need finite coordinates")
    return z


def as_output(value):
    # Scalars in, scalars out
    if np.ndim(value) == 0:
        return float(value)
    return value


def profile(z, lower, difference, interface_location, interface_thickness):
    """Tanh transition from `lower` at depth to `lower + difference` at the surface."""
    z = check_coordinate(z)
    Δ = difference / 2
    return as_output(Δ * np.tanh(interface_thickness * (z + interface_location)) + (lower + Δ))


def salinity_perturbation(z, interface_location, width):
    """Gaussian bump added to the salinity above the interface only."""
    z = check_coordinate(z)
    Δz = z + interface_location
    bump = np.exp(-(Δz - interface_location/2)**2 / (2 * width**2)) / np.sqrt(2 * np.pi * width**2)
    return as_output(np.where(z > -interface_location, bump, 0.0))


def salinity_profile(z, params, interface_location=0.5, interface_thickness=100,
                     perturb=True, perturbation_width=100):
    S = profile(z, params.S_lower, params.ΔS, interface_location, interface_thickness)
    if perturb:
        S = S + salinity_perturbation(z, interface_location, perturbation_width)
    return S


def temperature_profile(z, params, interface_location=0.5, interface_thickness=100):
    return profile(z, params.T_lower, params.ΔT, interface_location, interface_thickness)


def initial_salinity_profile(params, interface_location=0.5, interface_thickness=100,
                             perturb_salinity=True, salinity_perturbation_width=100):
    """Salinity initialiser with the engine signature (x, y, z) -> S."""
    def initial_S_profile(x, y, z):
        check_coordinate(x)
        check_coordinate(y)
        return salinity_profile(z, params, interface_location, interface_thickness,
                                perturb=perturb_salinity,
                                perturbation_width=salinity_perturbation_width)
    return initial_S_profile


def initial_temperature_profile(params, interface_location=0.5, interface_thickness=100):
    """Temperature initialiser with the engine signature (x, y, z) -> T."""
    def initial_T_profile(x, y, z):
        check_coordinate(x)
        check_coordinate(y)
        return temperature_profile(z, params, interface_location, interface_thickness)
    return initial_T_profile


def set_two_layer_initial_conditions(model, params, interface_location=0.5,
                                     interface_thickness=100, perturb_salinity=True,
                                     salinity_perturbation_width=100):
    """
    Set the tracers of `model` to the two-layer profiles.

    Parameters
    ----------
    model : object
        Model whose `set(S=..., T=...)` evaluates (x, y, z) functions on its grid
    params : TwoLayerParameters
        Upper and lower layer values
    interface_location : float (default: 0.5)
        Depth of the interface between the layers
    interface_thickness : float (default: 100)
        Steepness of the tanh transition
    perturb_salinity : bool (default: True)
        Perturb the upper layer salinity to trigger mixing
    salinity_perturbation_width : float (default: 100)
        Width of the Gaussian salinity perturbation
    """
    S = initial_salinity_profile(params, interface_location, interface_thickness,
                                 perturb_salinity, salinity_perturbation_width)
    T = initial_temperature_profile(params, interface_location, interface_thickness)
    model.set(S=S, T=T)
    logger.info('Set %s initial conditions: ΔS = %.3e, ΔT = %.3e'
                %(params.regime.stem, params.ΔS, params.ΔT))
