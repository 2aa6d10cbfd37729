"""
Language-specific code generators.

Only the Go/gin target exists today.
"""

from .go import GinGenerator, create_gin_generator

__all__ = ["GinGenerator", "create_gin_generator"]
