"""COS pricing engine (European reference prices for the PROJ and Mellin engines)."""

from __future__ import annotations

import logging

import numpy as np

from ..base_cf import CharacteristicFunction
from ..exceptions import InvalidParameterError, NumericInstabilityError

logger = logging.getLogger(__name__)


class COSPricer:
    """Fang-Oosterlee COS pricer over a CharacteristicFunction instance."""

    def __init__(self, model: CharacteristicFunction, N: int = 512, L: float = 10.0):
        if int(N) < 2:
            raise InvalidParameterError("COS expansion needs N >= 2 terms")
        if not np.isfinite(L) or L <= 0.0:
            raise InvalidParameterError("L must be > 0")
        self.model = model
        self.N = int(N)
        self.L = float(L)

    def _truncation_interval(self, T: float) -> tuple[float, float]:
        """[a, b] = c1 -/+ L sqrt(c2 + sqrt(c4)) for ln(S_T)."""
        c1, c2, c4 = self.model.cumulants(T)
        half_width = self.L * np.sqrt(max(c2, 0.0) + np.sqrt(max(c4, 0.0)))
        a, b = float(c1 - half_width), float(c1 + half_width)
        if not (np.isfinite(a) and np.isfinite(b)) or b <= a:
            raise NumericInstabilityError(f"Invalid COS truncation interval: a={a}, b={b}")
        return a, b

    @staticmethod
    def _cosine_moments(u: np.ndarray, a: float, c: np.ndarray, d: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        # chi_k = int_c^d e^y cos(u_k (y-a)) dy,  psi_k = int_c^d cos(u_k (y-a)) dy
        th_c, th_d = u * (c - a), u * (d - a)
        chi = (np.exp(d) * (np.cos(th_d) + u * np.sin(th_d))
               - np.exp(c) * (np.cos(th_c) + u * np.sin(th_c))) / (1.0 + u ** 2)
        psi = np.empty_like(chi)
        psi[0] = d[0] - c[0]
        psi[1:] = (np.sin(th_d[1:]) - np.sin(th_c[1:])) / u[1:]
        return chi, psi

    def european_price(self, K: np.ndarray, T: float, is_call: bool = True) -> np.ndarray:
        """European prices for a vector of strikes.

        Puts are priced from their own payoff coefficients, not through parity.
        """
        K = np.atleast_1d(np.asarray(K, dtype=float))
        if not np.isfinite(T) or T <= 0.0:
            raise InvalidParameterError("T must be > 0")
        if not np.all(np.isfinite(K)) or np.any(K <= 0.0):
            raise InvalidParameterError("Strikes must be finite and > 0")

        a, b = self._truncation_interval(T)
        u = (np.arange(self.N) * np.pi / (b - a))[:, None]
        phase = np.real(self.model.char_func(u.ravel(), T)[:, None] * np.exp(-1j * u * a))

        log_k = np.clip(np.log(K), a, b)[None, :]
        if is_call:
            chi, psi = self._cosine_moments(u, a, log_k, np.full_like(log_k, b))
            Vk = 2.0 / (b - a) * (chi - K[None, :] * psi)
        else:
            chi, psi = self._cosine_moments(u, a, np.full_like(log_k, a), log_k)
            Vk = 2.0 / (b - a) * (K[None, :] * psi - chi)

        terms = phase * Vk
        terms[0] *= 0.5
        logger.debug("COS %s T=%g on [%.4g, %.4g] with N=%d", type(self.model).__name__, T, a, b, self.N)
        return np.exp(-self.model.r * T) * terms.sum(axis=0)
