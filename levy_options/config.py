from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

from .exceptions import InvalidParameterError

if TYPE_CHECKING:
    from .model_input import ModelInput


@dataclass(frozen=True, slots=True)
class ProjGridConfig:
    """Grid sizing and density-check settings for the PROJ barrier engine.

    Two ways to size the grid:

    - cumulant rule (``use_cumulants=True``): ``N = 2**log_n`` and the truncation
      half-width from ``L1`` and the cumulants of the horizon log-return;
    - manual rule: ``N = 2**(P + Pbar)`` and ``alpha = 2**Pbar / 2``.
    """

    use_cumulants: bool = True
    log_n: int = 14
    L1: float = 12.0
    P: int = 8
    Pbar: int = 3
    mass_tol: float = 1e-8
    mean_tol: float = 1e-4
    strict: bool = False

    def __post_init__(self) -> None:
        if not 4 <= self.log_n <= 24:
            raise InvalidParameterError("log_n must be in [4, 24]")
        if self.L1 <= 0:
            raise InvalidParameterError("L1 must be > 0")
        if self.P < 0 or self.Pbar < 0 or not 4 <= self.P + self.Pbar <= 24:
            raise InvalidParameterError("P, Pbar must be >= 0 with 4 <= P + Pbar <= 24")
        if self.mass_tol <= 0 or self.mean_tol <= 0:
            raise InvalidParameterError("mass_tol and mean_tol must be > 0")

    def resolve(self, T: float, model_input: "ModelInput") -> Tuple[int, float]:
        """Return ``(N, alpha)`` for a pricing call with horizon ``T``."""
        from .proj.grid import manual_grid, truncation_alpha

        if self.use_cumulants:
            return 2 ** self.log_n, truncation_alpha(T, self.L1, model_input)
        log_n, alpha = manual_grid(self.P, self.Pbar)
        return 2 ** log_n, alpha
