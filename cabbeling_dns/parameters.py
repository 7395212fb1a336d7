"""
Control parameters for the two-layer cabbeling experiments.
"""

import pathlib
from dataclasses import dataclass
from types import MappingProxyType

import numpy as np

from .grid import generate_grid


@dataclass(frozen=True)
class Reference:
    """Lower layer reference state and output location shared by every run."""
    S: float = 34.7 # Lower layer salinity [g/kg]
    T: float = 0.5 # Lower layer temperature [°C]
    pressure: float = 0 # Pressure for equation of state evaluation [dbar]
    output_dir: pathlib.Path = pathlib.Path('data/simulations')


@dataclass(frozen=True)
class DomainSpec:
    """Physical extent and resolution of the box."""
    Lx: float = 0.1
    Ly: float = 0.1
    Lz: float = 1
    Nx: int = 50
    Ny: int = 50
    Nz: int = 100

    @property
    def extent(self):
        return (self.Lx, self.Ly, self.Lz)

    @property
    def resolution(self):
        return (self.Nx, self.Ny, self.Nz)


@dataclass(frozen=True)
class GridStretchSpec:
    """Vertical grid stretching: `refinement` sets the near surface spacing and
    `stretching` the rate of compression towards the bottom."""
    enabled: bool = True
    refinement: float = 1.2
    stretching: float = 100

    def faces(self, Lz, Nz):
        return generate_grid(Lz, Nz, self.refinement, self.stretching, self.enabled)


@dataclass(frozen=True)
class Diffusivities:
    """Kinematic viscosity and tracer diffusivities.

    A scalar `kappa` is used for both tracers, a mapping sets them per tracer.
    """
    nu: float
    kappa: object = 1e-7

    def __post_init__(self):
        if np.isscalar(self.kappa):
            kappa = {'S': self.kappa, 'T': self.kappa}
        else:
            kappa = dict(self.kappa)
        object.__setattr__(self, 'kappa', MappingProxyType(kappa))

    @property
    def kappa_S(self):
        return self.kappa['S']

    @property
    def kappa_T(self):
        return self.kappa['T']


REFERENCE = Reference()

# Domain
domain_extent = DomainSpec()

# Diffusivity estimates for the Southern Ocean
SO_diffusivities = Diffusivities(nu=1e-6, kappa={'S': 1e-9, 'T': 1e-7})

# Interface between the layers
interface_location = 0.5 # Depth of the interface
interface_thickness = 100 # Inverse width of the tanh transition
salinity_perturbation_width = 100

# Physical constants
g = 9.81 # Gravitational acceleration [m/s^2]

# Timestepping
timestepper = "RK222"
CFL = {'cfl': 0.75,
       'diffusive_cfl': 0.75,
       'max_change': 1.2,
       'max_dt': 1e-2,
       'cadence': 10}

# Analysis
output_iter = 50
progress_iter = 50
