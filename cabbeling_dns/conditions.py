"""
Initial conditions for the two-layer experiments.

The upper layer salinity and temperature are set relative to a fixed lower
layer reference state. The regime tag records how the upper layer relates to
the lower one:

    stable     statically stable, no cabbeling
    cabbeling  stable, but mixtures of the two layers are denser than either
    unstable   gravitationally unstable
    isohaline  no salinity contrast, upper salinity equal to the reference

"""

import enum
from dataclasses import dataclass

import numpy as np

from .errors import InvalidParameter
from .parameters import REFERENCE


class Regime(enum.Enum):
    """Regime tag; the value is the stem of the output file."""
    STABLE = 'stable'
    CABBELING = 'cabbeling'
    UNSTABLE = 'unstable'
    ISOHALINE = 'isohaline'

    @property
    def stem(self):
        return self.value


@dataclass(frozen=True)
class LayerPair:
    upper: float
    lower: float

    @property
    def difference(self):
        return self.upper - self.lower


@dataclass(frozen=True)
class UpperLayerConditions:
    """Upper layer salinity `S` and temperature `T` tagged with a regime."""
    regime: Regime
    S: float
    T: float


def stable(S, T):
    return UpperLayerConditions(Regime.STABLE, S, T)


def cabbeling(S, T):
    return UpperLayerConditions(Regime.CABBELING, S, T)


def unstable(S, T):
    return UpperLayerConditions(Regime.UNSTABLE, S, T)


def isohaline(T, reference=REFERENCE):
    """Isohaline upper layer: the salinity is always the reference salinity."""
    return UpperLayerConditions(Regime.ISOHALINE, reference.S, T)


CONSTRUCTORS = {Regime.STABLE: stable,
                Regime.CABBELING: cabbeling,
                Regime.UNSTABLE: unstable}


def upper_layer_conditions(regime, S, T, reference=REFERENCE):
    """Build conditions from a regime name or tag. `S` is ignored for isohaline."""
    regime = Regime(regime)
    if regime is Regime.ISOHALINE:
        return isohaline(T, reference=reference)
    return CONSTRUCTORS[regime](S, T)


@dataclass(frozen=True)
class TwoLayerParameters:
    """Upper and lower layer values with their differences (upper - lower)."""
    regime: Regime
    salinity: LayerPair
    temperature: LayerPair

    @property
    def S_upper(self):
        return self.salinity.upper

    @property
    def S_lower(self):
        return self.salinity.lower

    @property
    def ΔS(self):
        return self.salinity.difference

    @property
    def T_upper(self):
        return self.temperature.upper

    @property
    def T_lower(self):
        return self.temperature.lower

    @property
    def ΔT(self):
        return self.temperature.difference


def two_layer_parameters(conditions, reference=REFERENCE):
    """Two-layer parameter set from upper layer conditions."""
    S_upper = conditions.S
    if conditions.regime is Regime.ISOHALINE:
        S_upper = reference.S
    for name, value in (('S', S_upper), ('T', conditions.T)):
        if not np.isfinite(value):
            raise InvalidParameter("Upper layer %s must be finite, got %r" %(name, value))
    return TwoLayerParameters(regime=conditions.regime,
                              salinity=LayerPair(S_upper, reference.S),
                              temperature=LayerPair(conditions.T, reference.T))
