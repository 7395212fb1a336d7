"""
TEOS-10 coefficients from the Gibbs SeaWater toolbox.

Salinity is taken as Absolute Salinity and temperature as Conservative
Temperature, as in the gsw functions themselves.
"""

from collections import namedtuple

import gsw

Coefficients = namedtuple('Coefficients', ['alpha', 'beta', 'cabbeling'])


class TEOS10:
    """Thermal expansion, haline contraction and cabbeling coefficients."""

    def alpha(self, S, T, p):
        return gsw.alpha(S, T, p)

    def beta(self, S, T, p):
        return gsw.beta(S, T, p)

    def cabbeling(self, S, T, p):
        return gsw.cabbeling(S, T, p)

    def coefficients(self, reference):
        """Coefficients at the lower layer reference state."""
        args = (reference.S, reference.T, reference.pressure)
        return Coefficients(alpha=float(self.alpha(*args)),
                            beta=float(self.beta(*args)),
                            cabbeling=float(self.cabbeling(*args)))
