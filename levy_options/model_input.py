"""Model dispatch: parameter variant -> characteristic function -> per-step model input."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, Mapping

import numpy as np

from .base_cf import CharacteristicFunction, ModelKind
from .exceptions import InvalidParameterError
from .models import (
    CGMYCHF,
    GBMCHF,
    NIGCHF,
    BSMParams,
    CGMYParams,
    KouCHF,
    KouParams,
    MertonCHF,
    MJDParams,
    ModelParams,
    NIGParams,
)

logger = logging.getLogger(__name__)

MODEL_REGISTRY: Dict[ModelKind, tuple[type, type]] = {
    ModelKind.BSM: (BSMParams, GBMCHF),
    ModelKind.CGMY: (CGMYParams, CGMYCHF),
    ModelKind.NIG: (NIGParams, NIGCHF),
    ModelKind.MJD: (MJDParams, MertonCHF),
    ModelKind.KOU: (KouParams, KouCHF),
}


@dataclass(frozen=True)
class ModelInput:
    """Risk-neutral CHF and cumulants of the log-return over one monitoring interval."""

    rn_chf: Callable[[np.ndarray], np.ndarray]
    c1: float
    c2: float
    c4: float
    dt: float
    params: Any

    def horizon_cumulants(self, T: float) -> tuple[float, float, float]:
        # Levy cumulants are linear in time.
        scale = float(T) / self.dt
        return self.c1 * scale, self.c2 * scale, self.c4 * scale


def _kind(kind: ModelKind | str) -> ModelKind:
    try:
        return ModelKind(str(getattr(kind, "value", kind)).lower().strip())
    except ValueError:
        raise InvalidParameterError(f"Unknown model {kind!r}; expected one of {[k.value for k in ModelKind]}") from None


def make_params(kind: ModelKind | str, fields: Mapping[str, float]) -> ModelParams:
    """Build the parameter variant for ``kind`` from a field mapping."""
    params_cls, _ = MODEL_REGISTRY[_kind(kind)]
    try:
        return params_cls(**{str(k): float(v) for k, v in fields.items()})
    except TypeError as exc:
        raise InvalidParameterError(f"Bad fields for {params_cls.__name__}: {exc}") from None


def model_from_params(params: ModelParams, S0: float, r: float, q: float) -> CharacteristicFunction:
    kind = getattr(params, "kind", None)
    if kind not in MODEL_REGISTRY:
        raise InvalidParameterError(f"Unsupported model parameters: {type(params).__name__}")
    _, chf_cls = MODEL_REGISTRY[kind]
    return chf_cls(S0, r, q, params)


def get_model_input(params: ModelParams, dt: float, r: float, q: float) -> ModelInput:
    """Per-step model input for a monitoring interval of length ``dt``."""
    dt = float(dt)
    if not np.isfinite(dt) or dt <= 0.0:
        raise InvalidParameterError("dt must be > 0")
    model = model_from_params(params, 1.0, r, q)
    c1, c2, c4 = model.cumulants(dt)
    logger.debug("model input %s dt=%g: c1=%.6g c2=%.6g c4=%.6g", params, dt, c1, c2, c4)
    return ModelInput(
        rn_chf=partial(model.increment_char, dt=dt),
        c1=c1,
        c2=c2,
        c4=c4,
        dt=dt,
        params=params,
    )
