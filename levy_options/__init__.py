"""Levy-model option pricing: PROJ barrier engine, Mellin NIG series, COS reference."""

from .engine import (
    CharacteristicFunction,
    COSPricer,
    ProjBarrierPricer,
    ProjGridConfig,
    MellinNIGPricer,
    GBMCHF,
    MertonCHF,
    KouCHF,
    CGMYCHF,
    NIGCHF,
    BSMParams,
    MJDParams,
    KouParams,
    CGMYParams,
    NIGParams,
    get_model_input,
    mellin_nig_european_price,
    price_barrier,
)
from .exceptions import (
    GridResolutionWarning,
    InvalidParameterError,
    LevyOptionsError,
    NumericInstabilityError,
    SeriesConvergenceWarning,
)

__all__ = [
    "CharacteristicFunction",
    "COSPricer",
    "ProjBarrierPricer",
    "ProjGridConfig",
    "MellinNIGPricer",
    "GBMCHF",
    "MertonCHF",
    "KouCHF",
    "CGMYCHF",
    "NIGCHF",
    "BSMParams",
    "MJDParams",
    "KouParams",
    "CGMYParams",
    "NIGParams",
    "get_model_input",
    "mellin_nig_european_price",
    "price_barrier",
    "LevyOptionsError",
    "InvalidParameterError",
    "NumericInstabilityError",
    "SeriesConvergenceWarning",
    "GridResolutionWarning",
]
