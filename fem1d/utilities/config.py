"""
Package configuration and defaults.

The scalar type is a policy choice: double precision unless the environment
asks for numpy's extended precision.

    FEM1D_PRECISION   "double" (default) or "extended"
    FEM1D_CHECK_ZERO  "1" (default) or "0"
"""

import os
from dataclasses import dataclass

import numpy as np

from fem1d.utilities.errors import InvalidArgumentError

_PRECISIONS = {
    "double": np.float64,
    "extended": np.longdouble,
}


@dataclass
class FEMConfig:
    """Global configuration."""

    precision: str = "double"

    # Assembly refuses output buffers that are not all zeros
    check_zero: bool = True

    # Entries below this are treated as zero when looking for the band
    tolerance: float = 0.0

    def __post_init__(self):
        if self.precision not in _PRECISIONS:
            raise InvalidArgumentError(
                f"Unknown precision {self.precision!r}, "
                f"expected one of {sorted(_PRECISIONS)}"
            )

    @property
    def scalar(self):
        return _PRECISIONS[self.precision]


def _flag(value):
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise InvalidArgumentError(f"Invalid boolean flag {value!r}")


def from_environment(environ=None):
    environ = os.environ if environ is None else environ
    return FEMConfig(
        precision=environ.get("FEM1D_PRECISION", "double").strip().lower(),
        check_zero=_flag(environ.get("FEM1D_CHECK_ZERO", "1").strip().lower()),
    )


# Global config instance
CONFIG = from_environment()
