"""Mellin-transform series pricers."""

from .nig import MellinNIGPricer, SeriesResult, mellin_nig_european_price, mellin_nig_series

__all__ = ["MellinNIGPricer", "SeriesResult", "mellin_nig_european_price", "mellin_nig_series"]
