"""COS European pricer."""

from .pricer import COSPricer

__all__ = ["COSPricer"]
