"""Numerical helpers (factorial table, Pochhammer symbol)."""

from __future__ import annotations

import math

import numpy as np
from scipy.special import factorial as sp_factorial
from scipy.special import poch as sp_poch

from .exceptions import InvalidParameterError

FACTORIAL_TABLE_SIZE = 128

# 0!..127! as floats; built once and frozen.
FACTORIALS = sp_factorial(np.arange(FACTORIAL_TABLE_SIZE), exact=False).astype(float)
FACTORIALS.setflags(write=False)


def _as_index(n) -> int:
    if isinstance(n, (bool, np.bool_)):
        raise InvalidParameterError(f"factorial index must be an integer, got {n!r}")
    if isinstance(n, (int, np.integer)):
        return int(n)
    n_f = float(n)
    if not n_f.is_integer():
        raise InvalidParameterError(f"factorial index must be an integer, got {n!r}")
    return int(n_f)


def factorial(n) -> float:
    """Return ``n!`` from the precomputed table.

    Raises :class:`InvalidParameterError` outside ``0 <= n < FACTORIAL_TABLE_SIZE``.
    """
    idx = _as_index(n)
    if not 0 <= idx < FACTORIAL_TABLE_SIZE:
        raise InvalidParameterError(
            f"factorial index {idx} outside table range [0, {FACTORIAL_TABLE_SIZE - 1}]"
        )
    return float(FACTORIALS[idx])


def _neg_pochhammer(a: int, n: int) -> float:
    # (-m)_n for integer m >= 1
    m = -a
    if n > m:
        return 0.0
    return float((-1) ** n) * factorial(m) / factorial(m - n)


def pochhammer(a: float, n: int) -> float:
    """Generalized Pochhammer symbol ``(a)_n = a (a+1) ... (a+n-1)``.

    Cases
    -----
    - ``a == 0``: 1 when ``n <= 0`` and 0 when ``n > 0``.
    - ``a > 0``: rising product for ``n >= 0``. Negative ``n`` is not supported.
    - ``a < 0`` integer: ``(-1)^n m! / (m-n)!`` with ``m = -a``; zero once the product
      would contain the factor 0 (``n > m``).
    - ``a < 0`` non-integer: Gamma-ratio identity, ``n >= 0`` only.
    """
    if isinstance(n, (bool, np.bool_)) or not float(n).is_integer():
        raise InvalidParameterError(f"Pochhammer count must be an integer, got {n!r}")
    n = int(n)
    a_f = float(a)
    if not math.isfinite(a_f):
        raise InvalidParameterError("Pochhammer base must be finite")

    if a_f == 0.0:
        return 1.0 if n <= 0 else 0.0

    if a_f > 0.0:
        if n < 0:
            raise InvalidParameterError(
                f"Pochhammer symbol ({a_f})_{n} with positive base and negative count is not supported"
            )
        if n == 0:
            return 1.0
        if n == 1:
            return a_f
        return float(math.prod(a_f + i for i in range(n)))

    if a_f.is_integer():
        return _neg_pochhammer(int(a_f), n)
    if n < 0:
        raise InvalidParameterError(
            f"Pochhammer symbol ({a_f})_{n} with non-integer base and negative count is not supported"
        )
    return float(sp_poch(a_f, n))


def pochhammer_over_factorial(a, n_max: int) -> np.ndarray:
    """Table of ``(a)_j / j!`` for ``j = 0..n_max`` (rows) and each base in ``a`` (columns).

    Built by the recurrence ``r_{j+1} = r_j (a + j) / (j + 1)``. The entries equal
    ``pochhammer(a, j) / factorial(j)`` but stay finite where the numerator and the
    denominator overflow on their own.
    """
    idx = _as_index(n_max)
    if not 0 <= idx < FACTORIAL_TABLE_SIZE:
        raise InvalidParameterError(
            f"Pochhammer count {idx} outside table range [0, {FACTORIAL_TABLE_SIZE - 1}]"
        )
    a = np.atleast_1d(np.asarray(a, dtype=float))
    if not np.all(np.isfinite(a)):
        raise InvalidParameterError("Pochhammer base must be finite")
    j = np.arange(idx, dtype=float)[:, None]
    steps = (a[None, :] + j) / (j + 1.0)
    return np.vstack((np.ones((1, a.size)), np.cumprod(steps, axis=0)))
