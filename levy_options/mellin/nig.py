"""European options under NIG via the Mellin-transform residue series.

The call price is the convergent series (Aguilar & Kirkby, "Closed-form option
pricing in exponential Levy models", 2021)

    C = cons * sum_{n1, n2, n3} (-n1+n3+1)_{n2} k0^n1 beta^n2
            / (n1! n2! Gamma(1 + (-n1+n2+n3)/2))
            * K_{(n1-n2-n3+1)/2}(alpha delta T) * (delta T / (2 alpha))^{(-n1+n2+n3+1)/2}

with ``cons = W alpha exp((gamma delta - r) T) / sqrt(pi)`` and the risk-neutral
log-moneyness ``k0``. For ``beta == 0`` only the ``n2 = 0`` slice survives, which
collapses to a double sum. Puts follow from put-call parity.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass

import numpy as np
from scipy.special import kv, rgamma

from ..exceptions import InvalidParameterError, NumericInstabilityError, SeriesConvergenceWarning
from ..models.nig import NIGParams
from ..numerics import FACTORIAL_TABLE_SIZE, factorial, pochhammer_over_factorial

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeriesResult:
    price: float
    terms: int             # outer terms summed
    converged: bool        # tolerance met (always True when tol == 0)
    last_increment: float  # |sum - last| of the final outer term, in price units


@dataclass(frozen=True)
class _SeriesInputs:
    k0: float
    adt: float
    dta: float
    cons: float


def _series_inputs(S0: float, W: float, T: float, r: float, q: float, params: NIGParams) -> _SeriesInputs:
    alpha, beta, delta = params.alpha, params.beta, params.delta
    gam = params.gamma
    k0 = np.log(S0 / W) + (r - q + delta * (np.sqrt(alpha ** 2 - (beta + 1.0) ** 2) - gam)) * T
    return _SeriesInputs(
        k0=float(k0),
        adt=float(alpha * delta * T),
        dta=float(0.5 * delta * T / alpha),
        cons=float(W * alpha * np.exp((gam * delta - r) * T) / np.sqrt(np.pi)),
    )


def _symmetric_terms(n1: int, N1: int, s: _SeriesInputs) -> float:
    n2 = np.arange(1, N1 + 1)
    d = n1 - n2
    term = s.k0 ** n1 / factorial(n1) * rgamma(1.0 - d / 2.0)
    term = term * kv((d + 1) / 2.0, s.adt) * s.dta ** ((1 - d) / 2.0)
    return float(np.sum(term))


def _asymmetric_terms(n1: int, N1: int, beta: float, s: _SeriesInputs) -> float:
    n2 = np.arange(0, N1 + 1)[:, None]
    n3 = np.arange(1, N1 + 1)[None, :]
    # (-n1+n3+1)_{n2} / n2!, taken as one ratio so large N1 does not overflow
    ratio = pochhammer_over_factorial(-n1 + n3.ravel() + 1.0, N1)
    e = -n1 + n2 + n3
    coef = ratio * beta ** n2 * rgamma(1.0 + e / 2.0) * (s.k0 ** n1 / factorial(n1))
    bessel = kv((1 - e) / 2.0, s.adt) * s.dta ** ((e + 1) / 2.0)
    return float(np.sum(coef * bessel))


def _sum_series(N1: int, tol: float, beta: float, s: _SeriesInputs, symmetric: bool) -> tuple[float, int, bool, float]:
    """Outer loop with early exit once an outer term changes the sum by less than ``tol``."""
    total = 0.0
    last = 0.0
    increment = 0.0
    converged = tol <= 0.0
    terms = 0
    for n1 in range(N1 + 1):
        if symmetric:
            total += _symmetric_terms(n1, N1, s)
        else:
            total += _asymmetric_terms(n1, N1, beta, s)
        terms = n1 + 1
        if not np.isfinite(total):
            raise NumericInstabilityError(f"Mellin NIG series became non-finite at n1={n1}")
        increment = abs(total - last)
        last = total
        if n1 > 1 and increment < tol:
            converged = True
            break
    return total, terms, converged, increment


def _validate(S0: float, W: float, T: float, r: float, q: float, N1: int, tol: float) -> None:
    for name, val in (("S0", S0), ("W", W), ("T", T), ("r", r), ("q", q), ("tol", tol)):
        if not np.isfinite(val):
            raise InvalidParameterError(f"{name} must be finite")
    if S0 <= 0.0 or W <= 0.0 or T <= 0.0:
        raise InvalidParameterError("S0, W and T must be > 0")
    if tol < 0.0:
        raise InvalidParameterError("tol must be >= 0")
    if isinstance(N1, bool) or not float(N1).is_integer():
        raise InvalidParameterError("N1 must be an integer")
    if not 0 <= int(N1) < FACTORIAL_TABLE_SIZE:
        raise InvalidParameterError(f"N1 must be in [0, {FACTORIAL_TABLE_SIZE - 1}] (factorial table range)")


def mellin_nig_series(S0: float,
                      W: float,
                      T: float,
                      r: float,
                      q: float,
                      call: bool,
                      alpha: float,
                      beta: float,
                      delta: float,
                      N1: int,
                      tol: float = 0.0) -> SeriesResult:
    """Mellin series price with convergence diagnostics.

    Parameters
    ----------
    N1:
        maximum number of outer (and inner) summation terms; fewer outer terms are
        summed once ``tol`` is reached.
    tol:
        stop once an outer term moves the price by less than ``tol``. ``0`` sums
        all terms.
    """
    S0, W, T, r, q, tol = (float(v) for v in (S0, W, T, r, q, tol))
    _validate(S0, W, T, r, q, N1, tol)
    N1 = int(N1)
    params = NIGParams(float(alpha), float(beta), float(delta))
    s = _series_inputs(S0, W, T, r, q, params)

    total, terms, converged, increment = _sum_series(
        N1, tol / s.cons, params.beta, s, symmetric=(params.beta == 0.0)
    )
    price = s.cons * total
    if not call:
        price = price - (S0 * np.exp(-q * T) - W * np.exp(-r * T))
    if not np.isfinite(price):
        raise NumericInstabilityError("Mellin NIG price is not finite")

    logger.debug("Mellin NIG: %d outer terms, converged=%s, price=%.10g", terms, converged, price)
    return SeriesResult(price=float(price), terms=terms, converged=converged,
                        last_increment=float(s.cons * increment))


def mellin_nig_european_price(S0: float,
                              W: float,
                              T: float,
                              r: float,
                              q: float,
                              call: bool,
                              alpha: float,
                              beta: float,
                              delta: float,
                              N1: int,
                              tol: float = 0.0) -> float:
    """European call/put price under NIG by the Mellin series.

    Warns with :class:`SeriesConvergenceWarning` when ``tol > 0`` is not reached
    within ``N1`` outer terms.
    """
    res = mellin_nig_series(S0, W, T, r, q, call, alpha, beta, delta, N1, tol)
    if not res.converged:
        warnings.warn(
            f"Mellin NIG series did not reach tol={tol} within N1={N1} terms "
            f"(last increment {res.last_increment:.3e})",
            SeriesConvergenceWarning,
            stacklevel=2,
        )
    return res.price


class MellinNIGPricer:
    """Mellin series pricer bound to one set of NIG parameters."""

    def __init__(self, params: NIGParams, N1: int = 20, tol: float = 0.0):
        if not isinstance(params, NIGParams):
            raise InvalidParameterError("MellinNIGPricer expects NIGParams")
        self.params = params
        self.N1 = N1
        self.tol = tol

    def european_price(self, S0: float, W: float, T: float, r: float, q: float, is_call: bool = True) -> float:
        p = self.params
        return mellin_nig_european_price(S0, W, T, r, q, is_call, p.alpha, p.beta, p.delta, self.N1, self.tol)
