import numpy as np

from fem1d.utilities.config import CONFIG
from fem1d.utilities.errors import InvalidArgumentError


class LoadFunction:
    """Scalar function of one variable used as source term or coefficient.

    With ``positive=True`` every evaluation must be strictly positive, as
    required of a diffusion coefficient.
    """

    def __init__(self, fun, positive=False, name=None):
        if isinstance(fun, LoadFunction):
            fun = fun.get_functions()
        if not callable(fun):
            raise InvalidArgumentError(f"Expected a callable, got {type(fun).__name__}")
        self.fun = fun
        self.positive = positive
        self.name = name or getattr(fun, "__name__", "f")

    def evaluate(self, point):
        result = self.fun(point)
        if np.ndim(result) != 0:
            raise InvalidArgumentError(f"{self.name}({point}) must return a scalar")
        try:
            result = CONFIG.scalar(result)
        except (TypeError, ValueError):
            raise InvalidArgumentError(f"{self.name}({point}) must return a real number, got {result!r}")
        if not np.isfinite(result):
            raise InvalidArgumentError(f"{self.name}({point}) is not finite: {result}")
        if self.positive and result <= 0:
            raise InvalidArgumentError(f"{self.name}({point}) = {result} must be strictly positive")
        return result

    def __call__(self, point):
        return self.evaluate(point)

    def get_functions(self):
        return self.fun

    @classmethod
    def wrap(cls, fun, positive=False):
        if isinstance(fun, cls) and fun.positive == positive:
            return fun
        return cls(fun, positive=positive)
