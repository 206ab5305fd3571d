"""PROJ (B-spline projection) pricing of discretely monitored barrier options."""

from .barrier import ProjBarrierPricer, alive_mask, barrier_log_level, price_barrier
from .density import DensityKernel, check_kernel, project_density, propagate
from .grid import PricingGrid, build_grid, manual_grid, truncation_alpha
from .payoff import hat_exp_weight, payoff_coefficients, payoff_values, project_values

__all__ = [
    "ProjBarrierPricer",
    "price_barrier",
    "alive_mask",
    "barrier_log_level",
    "DensityKernel",
    "project_density",
    "check_kernel",
    "propagate",
    "PricingGrid",
    "build_grid",
    "manual_grid",
    "truncation_alpha",
    "hat_exp_weight",
    "payoff_coefficients",
    "payoff_values",
    "project_values",
]
