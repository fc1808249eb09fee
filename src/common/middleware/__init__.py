"""Common middleware for ClubPlus."""

from .observability import StructlogContextMiddleware

__all__ = ["StructlogContextMiddleware"]
