"""Model exports."""

from typing import Union

from .gbm import BSMParams, GBMCHF
from .merton import MJDParams, MertonCHF
from .kou import KouParams, KouCHF
from .cgmy import CGMYParams, CGMYCHF
from .nig import NIGParams, NIGCHF

ModelParams = Union[BSMParams, CGMYParams, NIGParams, MJDParams, KouParams]

__all__ = [
    "BSMParams",
    "CGMYParams",
    "NIGParams",
    "MJDParams",
    "KouParams",
    "ModelParams",
    "GBMCHF",
    "MertonCHF",
    "KouCHF",
    "CGMYCHF",
    "NIGCHF",
]
