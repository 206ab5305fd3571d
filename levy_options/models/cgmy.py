"""CGMY characteristic function model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Tuple

import numpy as np
from scipy.special import gamma as sp_gamma

from ..base_cf import CharacteristicFunction, ModelKind, require_finite
from ..exceptions import InvalidParameterError


@dataclass(frozen=True)
class CGMYParams:
    C: float
    G: float
    M: float
    Y: float

    kind: ClassVar[ModelKind] = ModelKind.CGMY

    def __post_init__(self) -> None:
        require_finite(C=self.C, G=self.G, M=self.M, Y=self.Y)
        if self.C <= 0.0 or self.G <= 0.0:
            raise InvalidParameterError("CGMY requires C > 0 and G > 0")
        # M > 1 keeps E[e^{X_1}] finite for the martingale correction
        if self.M <= 1.0:
            raise InvalidParameterError("CGMY requires M > 1")
        if not 0.0 < self.Y < 2.0 or self.Y == 1.0:
            raise InvalidParameterError("CGMY requires 0 < Y < 2 and Y != 1")


class CGMYCHF(CharacteristicFunction):
    """CGMY (Carr–Geman–Madan–Yor) class of tempered stable processes."""

    kind = ModelKind.CGMY
    params_type = CGMYParams

    def _psi(self, u: np.ndarray) -> np.ndarray:
        # psi(u) = C * Gamma(-Y) * [ (M - i u)^Y - M^Y + (G + i u)^Y - G^Y ]
        # Stable form: M^Y * ((1 - i u/M)^Y - 1) = M^Y * expm1(Y * log1p(-i u/M))
        u = np.asarray(u, dtype=complex)
        C, G, M, Y = self.params.C, self.params.G, self.params.M, self.params.Y
        term_m = np.power(M, Y) * np.expm1(Y * np.log1p(-1j * u / M))
        term_g = np.power(G, Y) * np.expm1(Y * np.log1p(1j * u / G))
        return C * sp_gamma(-Y) * (term_m + term_g)

    def _levy_cumulants(self) -> Tuple[float, float, float]:
        # k_n = C * Gamma(n - Y) * (M^(Y-n) + (-1)^n G^(Y-n))
        C, G, M, Y = self.params.C, self.params.G, self.params.M, self.params.Y

        def stable_pow(base, exp):
            return np.exp(exp * np.log(base))

        k1 = C * sp_gamma(1.0 - Y) * (stable_pow(M, Y - 1.0) - stable_pow(G, Y - 1.0))
        k2 = C * sp_gamma(2.0 - Y) * (stable_pow(M, Y - 2.0) + stable_pow(G, Y - 2.0))
        k4 = C * sp_gamma(4.0 - Y) * (stable_pow(M, Y - 4.0) + stable_pow(G, Y - 4.0))
        return float(k1), float(k2), float(k4)
