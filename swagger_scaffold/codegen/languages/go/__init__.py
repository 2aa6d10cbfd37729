"""
Go/gin code generator module.

Generates validated Go models, gin route tables and handlers, and
operation stubs from a Swagger document.
"""

from .generator import GinGenerator, create_gin_generator
from .models import ModelEmitter
from .naming import create_go_sanitizer, exported_name
from .operations import OperationEmitter, route_path
from .types import GoKind, GoType, GoTypeConfig, GoTypeMapper

__all__ = [
    "GinGenerator",
    "create_gin_generator",
    "ModelEmitter",
    "OperationEmitter",
    "route_path",
    "GoKind",
    "GoType",
    "GoTypeConfig",
    "GoTypeMapper",
    "create_go_sanitizer",
    "exported_name",
]
