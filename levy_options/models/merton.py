"""Merton jump-diffusion characteristic function model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Tuple

import numpy as np

from ..base_cf import CharacteristicFunction, ModelKind, require_finite
from ..exceptions import InvalidParameterError


@dataclass(frozen=True)
class MJDParams:
    sigma: float
    lam: float
    muj: float
    sigmaj: float

    kind: ClassVar[ModelKind] = ModelKind.MJD

    def __post_init__(self) -> None:
        require_finite(sigma=self.sigma, lam=self.lam, muj=self.muj, sigmaj=self.sigmaj)
        if self.sigma < 0.0 or self.sigmaj < 0.0:
            raise InvalidParameterError("MJD requires sigma >= 0 and sigmaj >= 0")
        if self.lam < 0.0:
            raise InvalidParameterError("MJD requires lam >= 0")
        if self.sigma == 0.0 and (self.lam == 0.0 or self.sigmaj == 0.0):
            raise InvalidParameterError("MJD with sigma = 0 needs Gaussian jumps (lam > 0, sigmaj > 0)")


class MertonCHF(CharacteristicFunction):
    """Merton jump‑diffusion (Gaussian jumps)."""

    kind = ModelKind.MJD
    params_type = MJDParams

    def _psi(self, u: np.ndarray) -> np.ndarray:
        u = np.asarray(u, dtype=complex)
        p = self.params
        # jump characteristic for additive log-jump: E[e^{i u Y}] = exp(i u muj - 0.5 u^2 sigmaj^2)
        phi_jump = np.exp(1j * u * p.muj - 0.5 * (u ** 2) * p.sigmaj ** 2)
        return -0.5 * (u ** 2) * (p.sigma ** 2) + p.lam * (phi_jump - 1.0)

    def convexity_correction(self) -> float:
        p = self.params
        # Jump mgf: E[e^{Y}] for Y ~ N(muj, sigmaj^2)
        kappa = np.exp(p.muj + 0.5 * p.sigmaj ** 2) - 1.0
        return float(0.5 * p.sigma ** 2 + p.lam * kappa)

    def _levy_cumulants(self) -> Tuple[float, float, float]:
        p = self.params
        EY = p.muj
        EY2 = p.muj ** 2 + p.sigmaj ** 2
        EY4 = p.muj ** 4 + 6.0 * p.muj ** 2 * p.sigmaj ** 2 + 3.0 * p.sigmaj ** 4
        return float(p.lam * EY), float(p.sigma ** 2 + p.lam * EY2), float(p.lam * EY4)
