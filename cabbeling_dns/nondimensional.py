"""
Non-dimensional numbers of the two-layer experiments:

    Prandtl number:            Pr = ν / κT
    Schmidt number:            Sc = ν / κS
    Lewis number:              Le = κT / κS
    Density Rayleigh number:   Ra_ρ = RaT / RaS = (α ΔT / β ΔS) * (1 / Le)

α and β are evaluated at the lower layer reference state.
"""

from collections.abc import Mapping

import numpy as np

from .conditions import Regime
from .eos import TEOS10
from .errors import DegenerateRatio, InvalidParameter
from .parameters import REFERENCE

import logging
logger = logging.getLogger(__name__)

KEYS = ('Pr', 'Sc', 'Le', 'Ra_ρ')


class NonDimensionalReport(Mapping):
    """Read-only mapping {Pr, Sc, Le, Ra_ρ}."""

    def __init__(self, Pr, Sc, Le, Ra_ρ):
        self._values = dict(zip(KEYS, (Pr, Sc, Le, Ra_ρ)))

    def __getitem__(self, key):
        return self._values[key]

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __repr__(self):
        return "NonDimensionalReport(%s)" %", ".join("%s=%r" %item for item in self._values.items())


def check_finite(**values):
    for name, value in values.items():
        if not np.isfinite(value):
            raise InvalidParameter("%s must be finite, got %r" %(name, value))


def check_nonzero(**values):
    for name, value in values.items():
        if value == 0:
            raise DegenerateRatio("%s = 0 leaves the non-dimensional numbers undefined" %name)


def diffusive_numbers(ν, κS, κT):
    """Prandtl, Schmidt and Lewis numbers."""
    check_finite(ν=ν, κS=κS, κT=κT)
    check_nonzero(κS=κS, κT=κT)
    return ν / κT, ν / κS, κT / κS


def compute(ν, κS, κT, α, β, ΔT, ΔS):
    """Compute the non-dimensional numbers from diffusivities and buoyancy coefficients."""
    Pr, Sc, Le = diffusive_numbers(ν, κS, κT)
    check_finite(α=α, β=β, ΔT=ΔT, ΔS=ΔS)
    check_nonzero(β=β, ΔS=ΔS)
    Ra_ρ = ((α * ΔT) / (β * ΔS)) * (1 / Le)
    return NonDimensionalReport(Pr, Sc, Le, Ra_ρ)


def non_dimensional_numbers(diffusivities, params, eos=None, reference=REFERENCE):
    """Non-dimensional numbers for a run with `diffusivities` and two-layer `params`."""
    if eos is None:
        eos = TEOS10()
    S, T, p = params.S_lower, params.T_lower, reference.pressure
    α = eos.alpha(S, T, p)
    β = eos.beta(S, T, p)
    return compute(diffusivities.nu, diffusivities.kappa_S, diffusivities.kappa_T,
                   float(α), float(β), params.ΔT, params.ΔS)


def experiment_numbers(diffusivities, params, eos=None, reference=REFERENCE):
    """
    Non-dimensional numbers to store with a run.

    Without a salinity contrast (isohaline runs) Ra_ρ is undefined and stored
    as NaN; any other degenerate ratio is an error.
    """
    try:
        return non_dimensional_numbers(diffusivities, params, eos=eos, reference=reference)
    except DegenerateRatio:
        if params.regime is not Regime.ISOHALINE or params.ΔS != 0:
            raise
    Pr, Sc, Le = diffusive_numbers(diffusivities.nu, diffusivities.kappa_S, diffusivities.kappa_T)
    logger.warning('No salinity contrast, Ra_ρ is undefined')
    return NonDimensionalReport(Pr, Sc, Le, np.nan)
