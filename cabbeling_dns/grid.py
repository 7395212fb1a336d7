"""
Vertical grid for the two-layer box.

The stretched grid follows the generating function of the Oceananigans
wind-mixing example: a linear near surface generator multiplied by a bottom
intensified stretching function,

    h(k)  = (k - 1) / Nz
    ζ0(k) = 1 + (h(k) - 1) / refinement
    Σ(k)  = (1 - exp(-stretching * h(k))) / (1 - exp(-stretching))
    z(k)  = Lz * (ζ0(k) * Σ(k) - 1)

for face indices k = 1, ..., Nz + 1.

"""

import numpy as np

from .errors import DegenerateStretching, InvalidParameter

import logging
logger = logging.getLogger(__name__)


def check_extent(Lz, Nz):
    if not np.isfinite(Lz) or Lz <= 0:
        raise InvalidParameter("Lz must be finite and positive, got %r" %Lz)
    if not np.isfinite(Nz) or int(Nz) != Nz or Nz < 1:
        raise InvalidParameter("Nz must be a positive integer, got %r" %Nz)


def grid_stretching(Lz, Nz, refinement, stretching):
    """Return the face generating function z_faces(k) of a stretched grid."""
    check_extent(Lz, Nz)
    if not np.isfinite(refinement) or refinement <= 0:
        raise InvalidParameter("refinement must be finite and positive, got %r" %refinement)
    if not np.isfinite(stretching):
        raise InvalidParameter("stretching must be finite, got %r" %stretching)
    if abs(stretching) <= np.finfo(float).eps:
        raise DegenerateStretching("stretching = %r is too close to zero" %stretching)

    # Normalised height ranging from 0 to 1
    def h(k):
        return (k - 1) / Nz
    # Linear near-surface generator
    def ζ0(k):
        return 1 + (h(k) - 1) / refinement
    # Bottom-intensified stretching function
    def Σ(k):
        return (1 - np.exp(-stretching * h(k))) / (1 - np.exp(-stretching))
    # Generating function
    def z_faces(k):
        return Lz * (ζ0(k) * Σ(k) - 1)

    return z_faces


def generate_grid(Lz, Nz, refinement=1.2, stretching=100, enabled=True):
    """
    Vertical face coordinates on [-Lz, 0].

    Parameters
    ----------
    Lz : float
        Depth of the domain
    Nz : int
        Number of cells
    refinement : float (default: 1.2)
        Controls the spacing near the surface
    stretching : float (default: 100)
        Rate of stretching at the bottom of the domain
    enabled : bool (default: True)
        Uniform spacing when False

    Returns
    -------
    z : ndarray
        Nz + 1 strictly increasing face coordinates
    """
    check_extent(Lz, Nz)
    Nz = int(Nz)
    if not enabled:
        return np.linspace(-Lz, 0, Nz + 1)
    z_faces = grid_stretching(Lz, Nz, refinement, stretching)
    z = z_faces(np.arange(1, Nz + 2, dtype=np.float64))
    # Pin the end points against roundoff
    z[0], z[-1] = -Lz, 0
    if not np.all(np.diff(z) > 0):
        raise DegenerateStretching("Faces are not increasing for refinement=%r, stretching=%r"
                                   %(refinement, stretching))
    logger.debug('Stretched grid: min dz = %e, max dz = %e' %(np.diff(z).min(), np.diff(z).max()))
    return z


def spacings(faces):
    """Cell thicknesses between consecutive faces."""
    return np.diff(faces)


def cell_centres(faces):
    """Midpoints between consecutive faces."""
    faces = np.asarray(faces)
    return (faces[1:] + faces[:-1]) / 2
