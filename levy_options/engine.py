"""Option-pricing engine (public shim).

The implementation lives in smaller modules:
- levy_options.base_cf
- levy_options.models.*
- levy_options.model_input
- levy_options.cos.pricer
- levy_options.proj.*
- levy_options.mellin.nig

This module re-exports the pricers and models so one import covers common use:
    from levy_options.engine import COSPricer, ProjBarrierPricer, NIGCHF, ...
"""

from __future__ import annotations

# Re-export core APIs
from .base_cf import CharacteristicFunction, ModelKind
from .config import ProjGridConfig
from .cos.pricer import COSPricer
from .mellin.nig import MellinNIGPricer, mellin_nig_european_price
from .model_input import ModelInput, get_model_input, make_params, model_from_params
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
    NIGParams,
)
from .proj.barrier import ProjBarrierPricer, price_barrier

__all__ = [
    # Base
    "CharacteristicFunction",
    "ModelKind",
    # Pricers
    "COSPricer",
    "ProjBarrierPricer",
    "ProjGridConfig",
    "price_barrier",
    "MellinNIGPricer",
    "mellin_nig_european_price",
    # Models
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
    # Dispatch
    "ModelInput",
    "get_model_input",
    "make_params",
    "model_from_params",
]
