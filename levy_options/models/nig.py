"""Normal Inverse Gaussian (NIG) characteristic function model.

We model the log-price as an exponential-Lévy process:
    ln S_T = ln S0 + (r-q)T - psi(-i)T + X_T
where X_T is an NIG Lévy process with characteristic exponent per unit time:
    psi(u) = delta * (gamma - sqrt(alpha^2 - (beta + i u)^2))
    gamma = sqrt(alpha^2 - beta^2)

The martingale correction uses psi(-i) so that E[S_T] = S0 * exp((r-q)T).

Parameter constraints for the risk-neutral correction to be real-valued:
- alpha > |beta|
- alpha > |beta + 1| (finite exp-moment at 1)
- delta > 0

References: Barndorff-Nielsen (1997) and standard exponential-Lévy option pricing texts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Tuple

import numpy as np

from ..base_cf import CharacteristicFunction, ModelKind, require_finite
from ..exceptions import InvalidParameterError


@dataclass(frozen=True)
class NIGParams:
    alpha: float
    beta: float
    delta: float

    kind: ClassVar[ModelKind] = ModelKind.NIG

    def __post_init__(self) -> None:
        require_finite(alpha=self.alpha, beta=self.beta, delta=self.delta)
        if self.alpha <= 0.0:
            raise InvalidParameterError("NIG requires alpha > 0")
        if self.delta <= 0.0:
            raise InvalidParameterError("NIG requires delta > 0")
        if self.alpha <= abs(self.beta):
            raise InvalidParameterError("NIG requires alpha > |beta|")
        # Need finite exp-moment at 1 for the martingale correction psi(-i).
        if self.alpha <= abs(self.beta + 1.0):
            raise InvalidParameterError("NIG requires alpha > |beta+1| for risk-neutral martingale correction")

    @property
    def gamma(self) -> float:
        return float(np.sqrt(self.alpha ** 2 - self.beta ** 2))


class NIGCHF(CharacteristicFunction):
    """Normal Inverse Gaussian (NIG) exponential-Lévy model."""

    kind = ModelKind.NIG
    params_type = NIGParams

    def _psi(self, u: np.ndarray) -> np.ndarray:
        u = np.asarray(u, dtype=complex)
        p = self.params
        sqrt_term = np.sqrt((p.alpha * p.alpha) - (p.beta + 1j * u) ** 2 + 0j)
        return p.delta * (p.gamma - sqrt_term)

    def convexity_correction(self) -> float:
        p = self.params
        gamma_c = float(np.sqrt((p.alpha * p.alpha) - ((p.beta + 1.0) ** 2)))
        return float(p.delta * (p.gamma - gamma_c))

    def _levy_cumulants(self) -> Tuple[float, float, float]:
        p = self.params
        gamma = p.gamma
        k1 = p.delta * (p.beta / gamma)
        k2 = p.delta * (p.alpha * p.alpha) / (gamma ** 3)
        k4 = 3.0 * p.delta * (p.alpha * p.alpha) * ((p.alpha * p.alpha) + 4.0 * (p.beta * p.beta)) / (gamma ** 7)
        return float(k1), float(k2), float(k4)
