"""GBM (Black-Scholes) characteristic function model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Tuple

import numpy as np

from ..base_cf import CharacteristicFunction, ModelKind, require_finite
from ..exceptions import InvalidParameterError


@dataclass(frozen=True)
class BSMParams:
    sigma: float

    kind: ClassVar[ModelKind] = ModelKind.BSM

    def __post_init__(self) -> None:
        require_finite(sigma=self.sigma)
        if self.sigma <= 0.0:
            raise InvalidParameterError("BSM requires sigma > 0")


class GBMCHF(CharacteristicFunction):
    """Black‑Scholes / GBM characteristic function."""

    kind = ModelKind.BSM
    params_type = BSMParams

    def _psi(self, u: np.ndarray) -> np.ndarray:
        u = np.asarray(u, dtype=complex)
        vol = float(self.params.sigma)
        return -0.5 * (u ** 2) * (vol ** 2)

    def convexity_correction(self) -> float:
        return 0.5 * float(self.params.sigma) ** 2

    def _levy_cumulants(self) -> Tuple[float, float, float]:
        return 0.0, float(self.params.sigma) ** 2, 0.0
