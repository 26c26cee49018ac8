"""Binding expressions, value formatters and flow variable resolution."""

from .engine import *  # noqa: F403
from .engine import __all__ as _engine_all

__version__ = "0.1.0"

__all__ = ["__version__", *_engine_all]
