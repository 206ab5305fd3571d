"""Grid sizing and placement for the PROJ barrier engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ..exceptions import InvalidParameterError
from ..model_input import ModelInput

logger = logging.getLogger(__name__)

MIN_GRID_SIZE = 16


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def truncation_alpha(T: float, L1: float, model_input: ModelInput) -> float:
    """Density truncation half-width from the cumulants of the horizon log-return.

    alpha = L1 * sqrt(|c2| + sqrt(|c4|)), with (c2, c4) scaled from one monitoring
    interval to the full horizon ``T``.
    """
    if not np.isfinite(T) or T <= 0.0:
        raise InvalidParameterError("T must be > 0")
    if not np.isfinite(L1) or L1 <= 0.0:
        raise InvalidParameterError("L1 must be > 0")
    _, c2, c4 = model_input.horizon_cumulants(T)
    alpha = float(L1) * np.sqrt(abs(c2) + np.sqrt(abs(c4)))
    if not np.isfinite(alpha) or alpha <= 0.0:
        raise InvalidParameterError(f"Cumulant rule produced an invalid truncation width alpha={alpha}")
    return float(alpha)


def manual_grid(P: int, Pbar: int) -> Tuple[int, float]:
    """Manual sizing: resolution 2**P per unit, density width 2**Pbar."""
    return int(P) + int(Pbar), 2.0 ** int(Pbar) / 2.0


@dataclass(frozen=True)
class PricingGrid:
    """Uniform log-price grid x = log(S/S0) with N nodes spanning [c1 - alpha, c1 + alpha].

    Node offsets range over +/-(N - 1) dx, so the transition density is projected
    on a kernel of twice the grid length with the same spacing.
    """

    N: int
    dx: float
    xmin: float
    n_spot: int
    spot_on_node: bool
    n_barrier: Optional[int] = None

    @property
    def alpha(self) -> float:
        return self.dx * (self.N - 1) / 2.0

    @property
    def kernel_size(self) -> int:
        return 2 * self.N

    @property
    def kernel_alpha(self) -> float:
        """Half-width giving a kernel of ``kernel_size`` points at spacing ``dx``."""
        return self.dx * (self.kernel_size - 1) / 2.0

    @property
    def x(self) -> np.ndarray:
        x = self.xmin + self.dx * np.arange(self.N)
        x.setflags(write=False)
        return x

    def value_at_spot(self, values: np.ndarray) -> float:
        """Read the value at x = 0 (node value, or linear interpolation)."""
        if self.spot_on_node:
            return float(values[self.n_spot])
        x0 = self.xmin + self.n_spot * self.dx
        w = (0.0 - x0) / self.dx
        return float((1.0 - w) * values[self.n_spot] + w * values[self.n_spot + 1])


def build_grid(N: int, alpha: float, h: Optional[float] = None, center: float = 0.0) -> PricingGrid:
    """Place the value grid.

    Parameters
    ----------
    N:
        number of value nodes (power of two, >= 16).
    alpha:
        half-width of the value grid; sets dx = 2 alpha / (N - 1).
    h:
        log-barrier log(H/S0), or None without barrier. The spacing is adjusted so that
        both 0 and h are nodes; when |h| < dx/2 the grid is aligned on h instead and the
        spot value is interpolated.
    center:
        mean log-return over the horizon; the grid is shifted towards it.
    """
    if isinstance(N, bool) or int(N) != N or not is_power_of_two(int(N)) or N < MIN_GRID_SIZE:
        raise InvalidParameterError(f"Grid size N must be a power of two >= {MIN_GRID_SIZE}, got {N!r}")
    N = int(N)
    if not np.isfinite(alpha) or alpha <= 0.0:
        raise InvalidParameterError(f"Truncation half-width alpha must be > 0, got {alpha!r}")

    dx = 2.0 * float(alpha) / (N - 1)
    offset = int(round(float(center) / dx)) if np.isfinite(center) else 0
    n0 = int(np.clip(N // 2 - offset, N // 4, N - N // 4))

    if h is None:
        grid = PricingGrid(N=N, dx=dx, xmin=-n0 * dx, n_spot=n0, spot_on_node=True)
        logger.debug("PROJ grid N=%d dx=%.6g xmin=%.6g (no barrier)", N, dx, grid.xmin)
        return grid

    if not np.isfinite(h):
        raise InvalidParameterError("log-barrier must be finite")
    j = int(round(abs(h) / dx))
    if j >= 1:
        dx = abs(h) / j
        n_h = n0 + j if h > 0 else n0 - j
        xmin = -n0 * dx
        n_spot, on_node = n0, True
    else:
        n_h = n0
        xmin = h - n0 * dx
        n_spot = n0 if h <= 0 else n0 - 1
        on_node = h == 0.0

    # the half-cell quadrature at the barrier needs three nodes on the alive side
    if not 3 <= n_h <= N - 4:
        lo, hi = xmin, xmin + (N - 1) * dx
        raise InvalidParameterError(
            f"Barrier log-level {h:.6g} lies outside the PROJ grid [{lo:.6g}, {hi:.6g}]; "
            "increase L1/alpha or move the barrier"
        )
    grid = PricingGrid(N=N, dx=dx, xmin=xmin, n_spot=n_spot, spot_on_node=on_node, n_barrier=n_h)
    logger.debug("PROJ grid N=%d dx=%.6g xmin=%.6g barrier node %d spot node %d", N, dx, xmin, n_h, n_spot)
    return grid
