"""Kou double-exponential jump-diffusion characteristic function model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Tuple

import numpy as np

from ..base_cf import CharacteristicFunction, ModelKind, require_finite
from ..exceptions import InvalidParameterError


@dataclass(frozen=True)
class KouParams:
    sigma: float
    lam: float
    p_up: float
    eta1: float
    eta2: float

    kind: ClassVar[ModelKind] = ModelKind.KOU

    def __post_init__(self) -> None:
        require_finite(sigma=self.sigma, lam=self.lam, p_up=self.p_up, eta1=self.eta1, eta2=self.eta2)
        if self.sigma <= 0.0:
            raise InvalidParameterError("Kou requires sigma > 0")
        if self.lam < 0.0:
            raise InvalidParameterError("Kou requires lam >= 0")
        if not 0.0 <= self.p_up <= 1.0:
            raise InvalidParameterError("Kou requires 0 <= p_up <= 1")
        # eta1 > 1 keeps E[e^Y] finite for the martingale correction
        if self.eta1 <= 1.0 or self.eta2 <= 0.0:
            raise InvalidParameterError("Kou requires eta1 > 1 and eta2 > 0")


class KouCHF(CharacteristicFunction):
    """Kou double‑exponential jump‑diffusion."""

    kind = ModelKind.KOU
    params_type = KouParams

    def _psi(self, u: np.ndarray) -> np.ndarray:
        u = np.asarray(u, dtype=complex)
        p = self.params
        # E[e^{i u Y}] = p * eta1 / (eta1 - i u) + (1-p) * eta2 / (eta2 + i u)
        phi_jump = p.p_up * (p.eta1 / (p.eta1 - 1j * u)) + (1.0 - p.p_up) * (p.eta2 / (p.eta2 + 1j * u))
        return -0.5 * (u ** 2) * (p.sigma ** 2) + p.lam * (phi_jump - 1.0)

    def convexity_correction(self) -> float:
        p = self.params
        kappa = p.p_up * (p.eta1 / (p.eta1 - 1.0)) + (1.0 - p.p_up) * (p.eta2 / (p.eta2 + 1.0)) - 1.0
        return float(0.5 * p.sigma ** 2 + p.lam * kappa)

    def _levy_cumulants(self) -> Tuple[float, float, float]:
        p = self.params
        EY = p.p_up / p.eta1 - (1.0 - p.p_up) / p.eta2
        EY2 = 2.0 * p.p_up / (p.eta1 ** 2) + 2.0 * (1.0 - p.p_up) / (p.eta2 ** 2)
        EY4 = 24.0 * p.p_up / (p.eta1 ** 4) + 24.0 * (1.0 - p.p_up) / (p.eta2 ** 4)
        return float(p.lam * EY), float(p.sigma ** 2 + p.lam * EY2), float(p.lam * EY4)
