"""Characteristic-function base model API.

Contains:
- ModelKind tags for the supported exponential-Levy models
- CharacteristicFunction base class (martingale-corrected increment CHF, cumulants)
- convenience wrappers for COS (European) and PROJ (barrier) pricing
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Tuple

import numpy as np

from .exceptions import InvalidParameterError

if TYPE_CHECKING:
    from .config import ProjGridConfig


class ModelKind(str, Enum):
    BSM = "bsm"    # Black-Scholes-Merton
    CGMY = "cgmy"
    NIG = "nig"    # Normal Inverse Gaussian
    MJD = "mjd"    # Merton jump diffusion
    KOU = "kou"    # Kou double exponential


def require_finite(**values: float) -> None:
    for name, value in values.items():
        if not np.isfinite(value):
            raise InvalidParameterError(f"{name} must be finite, got {value!r}")


class CharacteristicFunction:
    """
    Base class for all models.

    The log-price is ``ln S_t = ln S0 + (r - q - psi(-i)) t + X_t`` where ``X`` is a
    Levy process with unit-time characteristic exponent ``psi``. Subclasses implement
    :meth:`_psi` and :meth:`_levy_cumulants`; the martingale correction ``psi(-i)``
    makes ``E[S_t] = S0 exp((r-q) t)``.
    """

    kind: ClassVar[ModelKind]
    params_type: ClassVar[type]

    def __init__(self, S0: float, r: float, q: float, params: Any):
        require_finite(S0=S0, r=r, q=q)
        if S0 <= 0.0:
            raise InvalidParameterError("S0 must be > 0")
        if not isinstance(params, self.params_type):
            raise InvalidParameterError(
                f"{type(self).__name__} expects {self.params_type.__name__}, got {type(params).__name__}"
            )
        self.S0 = float(S0)
        self.r = float(r)
        self.q = float(q)
        self.params = params

    def _psi(self, u: np.ndarray) -> np.ndarray:
        """Unit-time characteristic exponent of the driving Levy process."""
        raise NotImplementedError

    def _levy_cumulants(self) -> Tuple[float, float, float]:
        """Unit-time cumulants (k1, k2, k4) of the driving Levy process."""
        raise NotImplementedError

    def convexity_correction(self) -> float:
        """psi(-i): log of E[exp(X_1)], subtracted from the drift."""
        return float(np.real(self._psi(np.array([-1j]))[0]))

    def increment_char(self, u: np.ndarray, dt: float) -> np.ndarray:
        """Characteristic of log-return increment over dt: E[e^{i u (ln S_{t+dt}-ln S_t)}]."""
        u = np.asarray(u, dtype=complex)
        dt = float(dt)
        drift = self.r - self.q - self.convexity_correction()
        return np.exp(dt * (1j * u * drift + self._psi(u)))

    def char_func(self, u: np.ndarray, T: float) -> np.ndarray:
        """Characteristic function of ln S_T."""
        u = np.asarray(u, dtype=complex)
        return self.increment_char(u, T) * np.exp(1j * u * np.log(self.S0))

    def cumulants(self, T: float) -> Tuple[float, float, float]:
        """Return (c1, c2, c4) cumulants of ln(S_T).

        Used for truncation domain selection via
        a = c1 - L * sqrt(c2 + sqrt(c4)), b = c1 + L * sqrt(c2 + sqrt(c4)).
        """
        T = float(T)
        k1, k2, k4 = self._levy_cumulants()
        c1 = np.log(self.S0) + (self.r - self.q - self.convexity_correction() + k1) * T
        return float(c1), float(k2 * T), float(k4 * T)

    # ----------------------------------------------------------------------- #
    # Convenience wrappers
    # ----------------------------------------------------------------------- #
    def european_price(self,
                       K: np.ndarray,
                       T: float,
                       is_call: bool = True,
                       N: int = 512,
                       L: float = 10.0) -> np.ndarray:
        """European option price via COS.

        This is a convenience wrapper around :class:`COSPricer`.
        """
        K = np.atleast_1d(K).astype(float)
        from .cos.pricer import COSPricer
        pricer = COSPricer(self, N=N, L=L)
        return pricer.european_price(K, T, is_call=is_call)

    def barrier_price(self,
                      W: float,
                      T: float,
                      H: float,
                      M: int,
                      is_call: bool = True,
                      down: bool = True,
                      rebate: float = 0.0,
                      config: "ProjGridConfig | None" = None) -> float:
        """Discretely monitored knock-out barrier price via PROJ.

        This is a convenience wrapper around :class:`ProjBarrierPricer`.
        """
        from .proj.barrier import ProjBarrierPricer
        pricer = ProjBarrierPricer(self, config=config)
        return pricer.price(W, T, H, M, is_call=is_call, down=down, rebate=rebate)
