"""Projected transition density of one monitoring interval.

The density of the log-return over ``dt`` is projected on the hat basis
phi((y - z_n) / dx). Its coefficients follow from one FFT of the characteristic
function times the Fourier transform of the dual (orthogonal-projection) basis:

    c_k = exp(-i w_k zmin) chf(w_k) (sin(w_k dx/2) / (w_k dx/2))^2 * 3 / (2 + cos(w_k dx)),
    beta = (2/N) Re FFT(c),  c_0 = 1/2.

Node n sits at z_n = zmin + n dx with zmin = (1 - N/2) dx, so the offsets between
any two of the N/2 value nodes are all covered.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ..config import ProjGridConfig
from ..exceptions import GridResolutionWarning, InvalidParameterError, NumericInstabilityError
from ..model_input import ModelInput
from .grid import MIN_GRID_SIZE, is_power_of_two
from .payoff import hat_exp_weight

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DensityKernel:
    beta: np.ndarray
    dx: float
    dt: float

    @property
    def N(self) -> int:
        return int(self.beta.size)

    @property
    def zmin(self) -> float:
        return (1 - self.N // 2) * self.dx

    @property
    def z(self) -> np.ndarray:
        return self.zmin + self.dx * np.arange(self.N)

    def band_mass(self) -> float:
        """Mass of the offsets reachable between value nodes (all but the last entry)."""
        return float(np.sum(self.beta[:-1]))

    def forward(self) -> float:
        """E[exp(Y)] reproduced from the projected density."""
        return float(hat_exp_weight(self.dx) * np.sum(self.beta * np.exp(self.z)))

    def circulant_symbol(self) -> np.ndarray:
        """FFT of the circulant embedding of the Toeplitz matrix T[j, k] = beta[K - 1 + k - j]."""
        K = self.N // 2
        col = np.concatenate((self.beta[K - 1::-1], [0.0], self.beta[2 * K - 2:K - 1:-1]))
        return np.fft.fft(col)


def project_density(N: int, alpha: float, model_input: ModelInput) -> DensityKernel:
    """Project the one-interval transition density of ``model_input`` on N hat functions."""
    if isinstance(N, bool) or int(N) != N or not is_power_of_two(int(N)) or N < MIN_GRID_SIZE:
        raise InvalidParameterError(f"Grid size N must be a power of two >= {MIN_GRID_SIZE}, got {N!r}")
    if not np.isfinite(alpha) or alpha <= 0.0:
        raise InvalidParameterError(f"Truncation half-width alpha must be > 0, got {alpha!r}")
    N = int(N)
    K = N // 2
    dx = 2.0 * float(alpha) / (N - 1)
    dw = 2.0 * np.pi / (N * dx)
    zmin = (1 - K) * dx

    w = dw * np.arange(1, N)
    wdx = w * dx
    basis = (np.sin(0.5 * wdx) / (0.5 * wdx)) ** 2 * 3.0 / (2.0 + np.cos(wdx))

    c = np.empty(N, dtype=complex)
    c[0] = 0.5
    c[1:] = np.exp(-1j * w * zmin) * model_input.rn_chf(w) * basis
    beta = (2.0 / N) * np.real(np.fft.fft(c))
    beta.setflags(write=False)
    return DensityKernel(beta=beta, dx=dx, dt=model_input.dt)


def check_kernel(kernel: DensityKernel,
                 model_input: ModelInput,
                 config: Optional[ProjGridConfig] = None) -> Tuple[float, float]:
    """Mass and martingale diagnostics of a projected density.

    Returns (|band mass - 1|, relative forward error). A non-finite kernel raises
    :class:`NumericInstabilityError`; tolerance breaches warn with
    :class:`GridResolutionWarning`, or raise when ``config.strict`` is set.
    """
    config = config or ProjGridConfig()
    if not np.all(np.isfinite(kernel.beta)):
        raise NumericInstabilityError("Projected density contains non-finite values")

    mass_err = abs(kernel.band_mass() - 1.0)
    fwd = float(np.real(model_input.rn_chf(np.array([-1j]))[0]))
    mean_err = abs(kernel.forward() / fwd - 1.0)
    logger.debug("PROJ kernel N=%d dx=%.6g: mass err %.3e, martingale err %.3e",
                 kernel.N, kernel.dx, mass_err, mean_err)

    if mass_err > config.mass_tol or mean_err > config.mean_tol:
        msg = (f"PROJ density under-resolved (N={kernel.N}, dx={kernel.dx:.4g}): "
               f"mass error {mass_err:.2e}, martingale error {mean_err:.2e}; "
               "increase log_n or L1")
        if config.strict:
            raise NumericInstabilityError(msg)
        warnings.warn(msg, GridResolutionWarning, stacklevel=2)
    return mass_err, mean_err


def propagate(symbol: np.ndarray, theta: np.ndarray) -> np.ndarray:
    """Continuation values C_j = sum_k beta[K - 1 + k - j] theta_k via the circulant symbol."""
    N = symbol.size
    K = theta.size
    padded = np.zeros(N)
    padded[:K] = theta
    return np.real(np.fft.ifft(symbol * np.fft.fft(padded)))[:K]
