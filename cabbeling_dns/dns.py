"""
Boussinesq DNS of a salinity/temperature stratified box in Dedalus.

The box is periodic in x and y with walls at z = -Lz and z = 0. Buoyancy uses
TEOS-10 coefficients at the lower layer reference state and keeps the
quadratic temperature term, which is what makes mixtures of the two layers
denser than either layer (cabbeling):

    b = g * (α (T - T0) - β (S - S0) + Cb/2 (T - T0)**2)

Tracers have no flux through the walls and the velocity is no-slip.
"""

import numpy as np
import dedalus.public as d3

from .eos import TEOS10
from .parameters import REFERENCE, g as gravity

import logging
logger = logging.getLogger(__name__)


class DNSModel:
    """Fields, closure and problem of a two-layer DNS."""

    def __init__(self, dist, bases, tracers, velocity, closure, problem, timestepper):
        self.dist = dist
        self.bases = bases
        self.tracers = tracers
        self.velocity = velocity
        self.closure = closure
        self.problem = problem
        self.timestepper = timestepper

    @property
    def grids(self):
        return self.dist.local_grids(*self.bases)

    @property
    def comm(self):
        return self.dist.comm

    def set(self, **profiles):
        """Set tracers from functions of (x, y, z), evaluated on the local grid."""
        x, y, z = self.grids
        for name, func in profiles.items():
            field = self.tracers[name]
            field.change_scales(1)
            field['g'] = np.broadcast_to(func(x, y, z), field['g'].shape)

    def z_nodes(self):
        """Global vertical collocation points of the Chebyshev basis, increasing."""
        zbasis = self.bases[2]
        return np.ravel(zbasis.global_grid(self.dist, scale=1))

    def build_solver(self):
        return self.problem.build_solver(getattr(d3, self.timestepper))


def DNS(domain_extent, diffusivities, reference=REFERENCE, eos=None, mesh=None,
        timestepper='RK222', dealias=3/2):
    """
    Build the two-layer DNS model.

    The vertical direction uses a Chebyshev basis on [-Lz, 0], whose
    collocation points already cluster at both walls. It takes the place of
    the stretched finite volume faces of `grid.generate_grid`, so no grid
    stretching parameters are taken here.

    Parameters
    ----------
    domain_extent : DomainSpec
        Extent (Lx, Ly, Lz) and resolution (Nx, Ny, Nz)
    diffusivities : Diffusivities
        Kinematic viscosity and tracer diffusivities
    reference : Reference
        Lower layer state about which the equation of state is expanded
    eos : TEOS10 or None
        Equation of state coefficients, TEOS10 by default
    mesh : tuple or None
        Process mesh for the Dedalus distributor
    timestepper : str (default: 'RK222')
        Name of a Dedalus timestepper
    """
    if eos is None:
        eos = TEOS10()
    Lx, Ly, Lz = domain_extent.extent
    Nx, Ny, Nz = domain_extent.resolution

    # Bases
    coords = d3.CartesianCoordinates('x', 'y', 'z')
    dist = d3.Distributor(coords, dtype=np.float64, mesh=mesh)
    xbasis = d3.RealFourier(coords['x'], size=Nx, bounds=(-Lx/2, Lx/2), dealias=dealias)
    ybasis = d3.RealFourier(coords['y'], size=Ny, bounds=(-Ly/2, Ly/2), dealias=dealias)
    zbasis = d3.ChebyshevT(coords['z'], size=Nz, bounds=(-Lz, 0), dealias=dealias)
    bases = (xbasis, ybasis, zbasis)

    # Fields
    p = dist.Field(name='p', bases=bases)
    S = dist.Field(name='S', bases=bases)
    T = dist.Field(name='T', bases=bases)
    u = dist.VectorField(coords, name='u', bases=bases)
    tau_p = dist.Field(name='tau_p')
    tau_S1 = dist.Field(name='tau_S1', bases=(xbasis, ybasis))
    tau_S2 = dist.Field(name='tau_S2', bases=(xbasis, ybasis))
    tau_T1 = dist.Field(name='tau_T1', bases=(xbasis, ybasis))
    tau_T2 = dist.Field(name='tau_T2', bases=(xbasis, ybasis))
    tau_u1 = dist.VectorField(coords, name='tau_u1', bases=(xbasis, ybasis))
    tau_u2 = dist.VectorField(coords, name='tau_u2', bases=(xbasis, ybasis))

    # Substitutions
    coeffs = eos.coefficients(reference)
    ex, ey, ez = coords.unit_vector_fields(dist)
    lift_basis = zbasis.derivative_basis(1)
    lift = lambda A: d3.Lift(A, lift_basis, -1)
    namespace = dict(
        p=p, S=S, T=T, u=u, tau_p=tau_p,
        tau_S1=tau_S1, tau_S2=tau_S2, tau_T1=tau_T1, tau_T2=tau_T2,
        tau_u1=tau_u1, tau_u2=tau_u2, ez=ez, lift=lift, Lz=Lz,
        ν=diffusivities.nu, κS=diffusivities.kappa_S, κT=diffusivities.kappa_T,
        g=gravity, α=coeffs.alpha, β=coeffs.beta, Cb=coeffs.cabbeling,
        S0=reference.S, T0=reference.T)
    namespace['grad_u'] = d3.grad(u) + ez*lift(tau_u1)
    namespace['grad_S'] = d3.grad(S) + ez*lift(tau_S1)
    namespace['grad_T'] = d3.grad(T) + ez*lift(tau_T1)

    # Problem
    problem = d3.IVP([p, S, T, u, tau_p, tau_S1, tau_S2, tau_T1, tau_T2, tau_u1, tau_u2], namespace=namespace)
    problem.add_equation("trace(grad_u) + tau_p = 0")
    problem.add_equation("dt(S) - κS*div(grad_S) + lift(tau_S2) = - u@grad(S)")
    problem.add_equation("dt(T) - κT*div(grad_T) + lift(tau_T2) = - u@grad(T)")
    problem.add_equation("dt(u) - ν*div(grad_u) + grad(p) + lift(tau_u2) = "
                         "g*(α*(T - T0) - β*(S - S0) + Cb/2*(T - T0)**2)*ez - u@grad(u)")
    problem.add_equation("ez@grad_S(z=-Lz) = 0")
    problem.add_equation("ez@grad_S(z=0) = 0")
    problem.add_equation("ez@grad_T(z=-Lz) = 0")
    problem.add_equation("ez@grad_T(z=0) = 0")
    problem.add_equation("u(z=-Lz) = 0")
    problem.add_equation("u(z=0) = 0")
    problem.add_equation("integ(p) = 0")
    logger.info('Built DNS problem: (Nx, Ny, Nz) = (%i, %i, %i), α = %.3e, β = %.3e, Cb = %.3e'
                %(Nx, Ny, Nz, coeffs.alpha, coeffs.beta, coeffs.cabbeling))

    return DNSModel(dist, bases, {'S': S, 'T': T}, u, diffusivities, problem, timestepper)
