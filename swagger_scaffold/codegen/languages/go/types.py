"""
Go-specific type system for code generation.

Maps Swagger primitive types, formats and references onto Go host types.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Optional
from enum import Enum

from ....spec import Parameter, Schema
from ...core.schema import ResolutionError
from .naming import exported_name


class GoKind(Enum):
    """Broad category of a Go host type."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    TEMPORAL = "temporal"
    MODEL = "model"
    ARRAY = "array"
    FILE = "file"


@dataclass(frozen=True)
class GoType:
    """
    Immutable representation of a Go type with the metadata emitters need.

    ``bits`` is the parse width for numeric types (32 or 64).
    """

    name: str
    kind: GoKind
    bits: int = 0
    imports_needed: FrozenSet[str] = field(default_factory=frozenset)
    element: Optional["GoType"] = None

    @property
    def is_numeric(self) -> bool:
        return self.kind in (GoKind.INTEGER, GoKind.FLOAT)

    @property
    def is_text(self) -> bool:
        return self.kind == GoKind.STRING

    @property
    def zero_literal(self) -> Optional[str]:
        """Literal compared against to detect an empty value, if there is one."""
        if self.is_text:
            return '""'
        if self.is_numeric:
            return "0"
        return None

    def qualified(self, package: str) -> str:
        """Type name as seen from another package (``[]Pet`` -> ``[]models.Pet``)."""
        if self.kind == GoKind.MODEL:
            return f"{package}.{self.name}"
        if self.kind == GoKind.ARRAY and self.element is not None:
            return f"[]{self.element.qualified(package)}"
        return self.name


@dataclass
class GoTypeConfig:
    """Configuration for Go type mapping behavior."""

    int_type: str = "int64"
    float_type: str = "float64"
    time_type: str = "time.Time"
    time_import: str = "time"
    temporal_formats: FrozenSet[str] = frozenset({"date-time"})


STRING = GoType("string", GoKind.STRING)
BOOL = GoType("bool", GoKind.BOOLEAN)
FILE = GoType("*multipart.FileHeader", GoKind.FILE, imports_needed=frozenset({"mime/multipart"}))

_INT_FORMATS = {"int32": 32, "int64": 64}
_FLOAT_FORMATS = {"float": ("float32", 32), "double": ("float64", 64)}


class GoTypeMapper:
    """Central engine for mapping Swagger schemas and parameters to Go types."""

    def __init__(self, config: Optional[GoTypeConfig] = None):
        """Initialize with type configuration."""
        self.config = config or GoTypeConfig()

    def map_schema(self, schema: Schema, context: str = "") -> GoType:
        """
        Map a property or items schema to a Go type.

        Args:
            schema: The schema node to map
            context: ``Definition.property`` used in error messages

        Returns:
            Matching GoType

        Raises:
            ResolutionError: If the shape has no Go counterpart
        """
        if schema.ref:
            return GoType(exported_name(schema.ref), GoKind.MODEL)

        if schema.type == "array":
            if schema.items is None:
                raise ResolutionError(f"Array {context} has no items schema")
            if schema.items.type == "array":
                raise ResolutionError(f"Nested arrays are not supported ({context})")
            element = self.map_schema(schema.items, context)
            return GoType(
                f"[]{element.name}",
                GoKind.ARRAY,
                imports_needed=element.imports_needed,
                element=element,
            )

        return self.map_primitive(schema.type, schema.format, context)

    def map_primitive(self, swagger_type: Optional[str], fmt: Optional[str], context: str = "") -> GoType:
        """Map a primitive ``type``/``format`` pair."""
        if swagger_type == "string":
            if fmt in self.config.temporal_formats:
                return GoType(
                    self.config.time_type,
                    GoKind.TEMPORAL,
                    imports_needed=frozenset({self.config.time_import}),
                )
            return STRING

        if swagger_type == "integer":
            if fmt in _INT_FORMATS:
                return GoType(fmt, GoKind.INTEGER, bits=_INT_FORMATS[fmt])
            return GoType(self.config.int_type, GoKind.INTEGER, bits=self._bits(self.config.int_type))

        if swagger_type == "number":
            if fmt in _FLOAT_FORMATS:
                name, bits = _FLOAT_FORMATS[fmt]
                return GoType(name, GoKind.FLOAT, bits=bits)
            return GoType(self.config.float_type, GoKind.FLOAT, bits=self._bits(self.config.float_type))

        if swagger_type == "boolean":
            return BOOL

        raise ResolutionError(f"Unsupported schema type {swagger_type!r} ({context})")

    def map_parameter(self, param: Parameter) -> GoType:
        """Map a non-body parameter to the Go type its handler decodes into."""
        context = f"parameter '{param.name}'"
        if param.type == "file":
            return FILE
        if param.type == "array":
            if param.items is None or param.items.type != "string":
                raise ResolutionError(f"Only arrays of strings are supported for {context}")
            return GoType("[]string", GoKind.ARRAY, element=STRING)
        go_type = self.map_primitive(param.type, param.format, context)
        if go_type.kind == GoKind.TEMPORAL:
            # handlers pass timestamps through as text
            return STRING
        return go_type

    @staticmethod
    def _bits(type_name: str) -> int:
        digits = "".join(ch for ch in type_name if ch.isdigit())
        return int(digits) if digits else 64
