"""Discretely monitored knock-out barrier options by PROJ.

Backward recursion over the M monitoring dates t_m = m T / M (maturity included):

    theta^(M) = hat coefficients of the payoff, alive beyond the barrier, rebate outside
    v^(m)     = exp(-r dt) * T_beta theta^(m+1)           (Toeplitz product via FFT)
    theta^(m) = re-projection of v^(m) with knocked-out nodes set to the rebate

and the price is read off v^(0) at x = 0.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np

from ..config import ProjGridConfig
from ..exceptions import InvalidParameterError, NumericInstabilityError
from ..model_input import ModelInput, get_model_input
from .density import check_kernel, project_density, propagate
from .grid import PricingGrid, build_grid
from .payoff import payoff_coefficients, project_values

logger = logging.getLogger(__name__)


def _validate_contract(S0: float, W: float, H: float, M: int, r: float, q: float, T: float, rebate: float) -> None:
    if isinstance(M, bool) or int(M) != M or M < 1:
        raise InvalidParameterError(f"Number of monitoring dates M must be an integer >= 1, got {M!r}")
    for name, val in (("S0", S0), ("W", W), ("r", r), ("q", q), ("T", T), ("rebate", rebate)):
        if not np.isfinite(val):
            raise InvalidParameterError(f"{name} must be finite")
    if S0 <= 0.0 or W <= 0.0 or T <= 0.0:
        raise InvalidParameterError("S0, W and T must be > 0")
    if rebate < 0.0:
        raise InvalidParameterError("rebate must be >= 0")
    if np.isnan(H) or H < 0.0:
        raise InvalidParameterError("Barrier H must be >= 0")


def barrier_log_level(H: float, S0: float, down: bool) -> Optional[float]:
    """log(H/S0), or None when the barrier can never be hit (H = 0 down, H = inf up)."""
    if down and H == 0.0:
        return None
    if not down and np.isinf(H):
        return None
    if H == 0.0 or np.isinf(H):
        raise InvalidParameterError(f"Barrier H={H} is not representable for a {'down' if down else 'up'}-and-out contract")
    return float(np.log(H / S0))


def alive_mask(grid: PricingGrid, down: bool) -> np.ndarray:
    """Nodes still alive after monitoring; the barrier node itself survives."""
    idx = np.arange(grid.N)
    if grid.n_barrier is None:
        return np.ones(grid.N, dtype=bool)
    return idx >= grid.n_barrier if down else idx <= grid.n_barrier


def price_barrier(N: int,
                  alpha: float,
                  call: bool,
                  down: bool,
                  S0: float,
                  W: float,
                  H: float,
                  M: int,
                  r: float,
                  q: float,
                  model_input: ModelInput,
                  T: float,
                  rebate: float = 0.0,
                  config: Optional[ProjGridConfig] = None) -> float:
    """Price a down/up-and-out call/put monitored at M equally spaced dates.

    ``model_input`` must describe one monitoring interval T / M. A barrier at
    H = 0 (down) or H = inf (up) never triggers and yields the European price.
    """
    config = config or ProjGridConfig()
    S0, W, H, r, q, T, rebate = (float(v) for v in (S0, W, H, r, q, T, rebate))
    _validate_contract(S0, W, H, M, r, q, T, rebate)
    M = int(M)
    dt = T / M
    if not math.isclose(model_input.dt, dt, rel_tol=1e-10):
        raise InvalidParameterError(f"model_input describes dt={model_input.dt}, expected T/M={dt}")

    h = barrier_log_level(H, S0, down)
    c1_T, _, _ = model_input.horizon_cumulants(T)
    grid = build_grid(N, alpha, h=h, center=c1_T)

    kernel = project_density(grid.kernel_size, grid.kernel_alpha, model_input)
    check_kernel(kernel, model_input, config)
    symbol = kernel.circulant_symbol()

    lower = h if (h is not None and down) else None
    upper = h if (h is not None and not down) else None
    theta = payoff_coefficients(grid.x, grid.dx, S0, W, call, lower=lower, upper=upper, rebate=rebate)
    alive = alive_mask(grid, down)
    disc = np.exp(-r * dt)

    values = disc * propagate(symbol, theta)
    for _ in range(M - 1):
        values = np.where(alive, values, rebate)
        theta = project_values(values, grid.n_barrier, down, rebate)
        values = disc * propagate(symbol, theta)

    price = grid.value_at_spot(values)
    if not np.isfinite(price):
        raise NumericInstabilityError("PROJ barrier price is not finite")
    logger.debug("PROJ barrier %s-and-out %s W=%g H=%g M=%d: %.10g",
                 "down" if down else "up", "call" if call else "put", W, H, M, price)
    return price


class ProjBarrierPricer:
    """Knock-out barrier pricer over a characteristic-function model."""

    def __init__(self, model, config: Optional[ProjGridConfig] = None):
        self.model = model
        self.config = config or ProjGridConfig()

    def price(self,
              W: float,
              T: float,
              H: float,
              M: int,
              is_call: bool = True,
              down: bool = True,
              rebate: float = 0.0) -> float:
        m = self.model
        _validate_contract(m.S0, W, H, M, m.r, m.q, T, rebate)
        model_input = get_model_input(m.params, T / int(M), m.r, m.q)
        N, alpha = self.config.resolve(T, model_input)
        return price_barrier(N, alpha, is_call, down, m.S0, W, H, M, m.r, m.q,
                             model_input, T, rebate=rebate, config=self.config)
