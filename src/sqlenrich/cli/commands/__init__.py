"""CLI command implementations."""

from .classify import classify
from .codes import codes

__all__ = [
    "classify",
    "codes",
]
