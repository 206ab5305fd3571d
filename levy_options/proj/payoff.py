"""Payoff projection onto the linear B-spline (hat) basis.

Coefficients are the normalised inner products
    theta_k = int G(x_k + t dx) (1 - |t|) dt,   t in [-1, 1],
computed exactly up to Gauss-Legendre precision on the smooth pieces of G.
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

_GL_NODES, _GL_WEIGHTS = np.polynomial.legendre.leggauss(5)


def hat_exp_weight(dx: float) -> float:
    """int e^{dx t} (1 - |t|) dt over [-1, 1] = 2 (cosh dx - 1) / dx^2."""
    return float((2.0 * np.sinh(0.5 * dx) / dx) ** 2)


def _piece(lo: np.ndarray, hi: np.ndarray, c: float, right: bool) -> Tuple[np.ndarray, np.ndarray]:
    # Integrals of (1 -/+ t) and e^{ct}(1 -/+ t) over [lo, hi] inside one half of the hat.
    half = 0.5 * (hi - lo)
    mid = 0.5 * (hi + lo)
    t = mid[:, None] + half[:, None] * _GL_NODES[None, :]
    w = (1.0 - t) if right else (1.0 + t)
    wq = half[:, None] * _GL_WEIGHTS[None, :] * w
    return wq.sum(axis=1), (wq * np.exp(c * t)).sum(axis=1)


def _hat_integrals(lo: np.ndarray, hi: np.ndarray, c: float) -> Tuple[np.ndarray, np.ndarray]:
    """Return (int (1-|t|) dt, int e^{ct} (1-|t|) dt) over [lo, hi] within [-1, 1]."""
    lo = np.clip(lo, -1.0, 1.0)
    hi = np.maximum(np.clip(hi, -1.0, 1.0), lo)
    i0_l, i1_l = _piece(np.minimum(lo, 0.0), np.minimum(hi, 0.0), c, right=False)
    i0_r, i1_r = _piece(np.maximum(lo, 0.0), np.maximum(hi, 0.0), c, right=True)
    return i0_l + i0_r, i1_l + i1_r


def payoff_values(x: np.ndarray, S0: float, W: float, is_call: bool) -> np.ndarray:
    """Nodal vanilla payoff on log-price nodes x = log(S/S0)."""
    S = S0 * np.exp(np.asarray(x, dtype=float))
    return np.maximum(S - W, 0.0) if is_call else np.maximum(W - S, 0.0)


def payoff_coefficients(x: np.ndarray,
                        dx: float,
                        S0: float,
                        W: float,
                        is_call: bool,
                        lower: Optional[float] = None,
                        upper: Optional[float] = None,
                        rebate: float = 0.0) -> np.ndarray:
    """Hat-basis coefficients of the vanilla payoff alive on [lower, upper], rebate outside."""
    x = np.asarray(x, dtype=float)
    lo_x = -np.inf if lower is None else float(lower)
    hi_x = np.inf if upper is None else float(upper)
    kw = float(np.log(W / S0))

    if is_call:
        a, b = max(kw, lo_x), hi_x
    else:
        a, b = lo_x, min(kw, hi_x)
    i0, i1 = _hat_integrals((a - x) / dx, (b - x) / dx, dx)
    vanilla = S0 * np.exp(x) * i1 - W * i0
    theta = vanilla if is_call else -vanilla

    if rebate != 0.0:
        dead_lo, _ = _hat_integrals(np.full_like(x, -1.0), (lo_x - x) / dx, dx)
        dead_hi, _ = _hat_integrals((hi_x - x) / dx, np.full_like(x, 1.0), dx)
        theta = theta + rebate * (dead_lo + dead_hi)
    return theta


def project_values(values: np.ndarray,
                   n_barrier: Optional[int] = None,
                   down: bool = True,
                   rebate: float = 0.0) -> np.ndarray:
    """Re-project nodal values on the hat basis between monitoring dates.

    Interior nodes use (v[k-1] + 10 v[k] + v[k+1]) / 12. At the barrier node the alive
    half cell is integrated with a one-sided cubic rule and the knocked-out half
    carries the rebate.
    """
    v = np.asarray(values, dtype=float)
    theta = v.copy()
    theta[1:-1] = (v[:-2] + 10.0 * v[1:-1] + v[2:]) / 12.0
    if n_barrier is None:
        return theta

    n = int(n_barrier)
    if down:
        theta[:n] = rebate
        theta[n] = 0.5 * rebate + (13.0 * v[n] + 15.0 * v[n + 1] - 5.0 * v[n + 2] + v[n + 3]) / 48.0
    else:
        theta[n + 1:] = rebate
        theta[n] = 0.5 * rebate + (13.0 * v[n] + 15.0 * v[n - 1] - 5.0 * v[n - 2] + v[n - 3]) / 48.0
    return theta
