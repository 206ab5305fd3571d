"""Error and warning taxonomy shared by the pricing engines."""


class LevyOptionsError(Exception):
    """Base class for all errors raised by ``levy_options``."""


class InvalidParameterError(LevyOptionsError, ValueError):
    """Raised when a model, contract or numerical parameter is outside its valid domain.

    Examples are an NIG parameter set with ``alpha <= |beta|``, a series length that
    overflows the factorial table, a PROJ grid size that is not a power of two, or a
    barrier level that falls outside the constructed grid.
    """


class NumericInstabilityError(LevyOptionsError, ArithmeticError):
    """Raised when an intermediate or final quantity is not finite, or when a
    projected transition density fails its conservation checks in strict mode."""


class SeriesConvergenceWarning(UserWarning):
    """The Mellin series exhausted its terms before reaching the requested tolerance."""


class GridResolutionWarning(UserWarning):
    """The projected transition density does not conserve mass/forward to tolerance.

    Usually a sign that the grid is too coarse or too narrow for the model.
    """
