"""
Generation descriptors built from raw spec schemas.

The SchemaResolver turns one named definition into a GenDefinition: a
root GenSchema for the record itself plus one GenSchema per property, in
declared order. Trees are built fresh for every run and never cached.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from ...spec import Schema
from .formats import FormatRegistry
from .generator import GeneratorError

if TYPE_CHECKING:
    from ..languages.go.types import GoType, GoTypeMapper


class ResolutionError(GeneratorError):
    """A reference cannot be resolved or a schema shape is unsupported."""

    pass


@dataclass(frozen=True)
class ResolvedType:
    """Host type chosen for a schema plus the source type it came from."""

    host: "GoType"
    swagger_type: Optional[str] = None
    swagger_format: Optional[str] = None

    @property
    def is_temporal(self) -> bool:
        from ..languages.go.types import GoKind

        return self.host.kind == GoKind.TEMPORAL

    @property
    def is_primitive(self) -> bool:
        from ..languages.go.types import GoKind

        return self.host.kind in (GoKind.STRING, GoKind.INTEGER, GoKind.FLOAT, GoKind.BOOLEAN)


@dataclass
class SharedValidations:
    """Aggregated constraint set that drives validator emission."""

    required: bool = False
    has_validations: bool = False

    max_length: Optional[int] = None
    min_length: Optional[int] = None
    pattern: Optional[str] = None
    multiple_of: Optional[float] = None
    minimum: Optional[float] = None
    exclusive_minimum: bool = False
    maximum: Optional[float] = None
    exclusive_maximum: bool = False
    enum: Optional[List[Any]] = None

    # Registered extended format, if any
    extended_format: Optional[str] = None

    def has_constraints(self) -> bool:
        return any(
            value is not None
            for value in (
                self.max_length,
                self.min_length,
                self.pattern,
                self.multiple_of,
                self.minimum,
                self.maximum,
                self.enum,
            )
        )


@dataclass
class GenSchema:
    """Descriptor for a definition or one of its properties."""

    name: str
    go_name: str
    resolved_type: ResolvedType
    shared_validations: SharedValidations = field(default_factory=SharedValidations)
    description: Optional[str] = None
    example: Any = None
    default: Any = None

    @property
    def required(self) -> bool:
        return self.shared_validations.required

    @property
    def has_validations(self) -> bool:
        return self.shared_validations.has_validations


@dataclass
class GenDefinition:
    """Everything the model emitter needs for one record."""

    name: str
    go_name: str
    package: str
    file_name: str
    gen_schema: GenSchema
    properties: List[GenSchema] = field(default_factory=list)
    default_imports: List[str] = field(default_factory=list)

    @property
    def validating_properties(self) -> List[GenSchema]:
        return [prop for prop in self.properties if prop.has_validations]


class SchemaResolver:
    """
    Resolve named definitions into GenDefinition trees.

    Args:
        definitions: Every definition in the document, for reference lookup
        registry: Extended-format predicates
        type_mapper: Maps schema nodes to host types
        package: Package the records are emitted into
    """

    def __init__(
        self,
        definitions: Dict[str, Schema],
        registry: FormatRegistry,
        type_mapper: "GoTypeMapper",
        package: str = "models",
    ):
        self.definitions = definitions
        self.registry = registry
        self.type_mapper = type_mapper
        self.package = package

    def resolve(self, name: str, schema: Optional[Schema] = None) -> GenDefinition:
        """
        Build the descriptor for one definition.

        Args:
            name: Definition name as declared in the document
            schema: Raw schema node; looked up in ``definitions`` when omitted

        Returns:
            GenDefinition with properties in declared order

        Raises:
            ResolutionError: On an unresolved reference or unsupported shape
        """
        from ..languages.go.naming import exported_name
        from ..languages.go.types import GoKind, GoType

        if schema is None:
            if name not in self.definitions:
                raise ResolutionError(f"Unknown definition '{name}'")
            schema = self.definitions[name]

        if schema.ref:
            raise ResolutionError(f"Definition '{name}' is a bare reference to '{schema.ref}'")
        if not schema.is_object:
            raise ResolutionError(f"Definition '{name}' must be an object schema, got {schema.type!r}")

        go_name = exported_name(name)
        required = set(schema.required)
        properties = [
            self.resolve_property(name, prop_name, prop_schema, prop_name in required)
            for prop_name, prop_schema in schema.properties.items()
        ]

        fields: Dict[str, str] = {}
        for prop in properties:
            if prop.go_name == "Validate":
                raise ResolutionError(
                    f"Property '{prop.name}' of {name} maps to Go field 'Validate', which clashes with the Validate method"
                )
            if prop.go_name in fields:
                raise ResolutionError(
                    f"Properties '{fields[prop.go_name]}' and '{prop.name}' of {name} both map to Go field '{prop.go_name}'"
                )
            fields[prop.go_name] = prop.name

        root = GenSchema(
            name=name,
            go_name=go_name,
            resolved_type=ResolvedType(GoType(go_name, GoKind.MODEL), "object"),
            shared_validations=SharedValidations(
                required=True,
                has_validations=any(prop.has_validations for prop in properties),
            ),
            description=schema.description,
        )

        imports = set()
        for prop in properties:
            imports.update(prop.resolved_type.host.imports_needed)

        return GenDefinition(
            name=name,
            go_name=go_name,
            package=self.package,
            file_name=_snake_file_name(go_name),
            gen_schema=root,
            properties=properties,
            default_imports=sorted(imports),
        )

    def resolve_property(self, owner: str, name: str, schema: Schema, required: bool) -> GenSchema:
        """Resolve one property of ``owner``."""
        from ..languages.go.naming import exported_name

        context = f"{owner}.{name}"
        self._check_references(schema, context)
        host = self.type_mapper.map_schema(schema, context)
        resolved = ResolvedType(host, schema.type, schema.format)

        validations = SharedValidations(required=required)
        if resolved.is_primitive:
            self._copy_constraints(schema, validations, context)
            if host.is_text and self.registry.has_predicate(schema.format):
                validations.extended_format = schema.format
            validations.has_validations = (
                validations.has_constraints() or validations.extended_format is not None
            )

        return GenSchema(
            name=name,
            go_name=exported_name(name),
            resolved_type=resolved,
            shared_validations=validations,
            description=schema.description,
            example=schema.example,
            default=schema.default,
        )

    def _check_references(self, schema: Schema, context: str) -> None:
        target = schema.ref or (schema.items.ref if schema.items is not None else None)
        if target is not None and target not in self.definitions:
            raise ResolutionError(f"Unresolved reference '{target}' in {context}")
        if schema.ref is None and schema.type is None:
            raise ResolutionError(f"Property {context} declares neither a type nor a reference")
        if schema.type == "object" and schema.ref is None:
            raise ResolutionError(f"Inline object {context} is not supported; use a definition reference")

    def _copy_constraints(self, schema: Schema, validations: SharedValidations, context: str) -> None:
        host = self.type_mapper.map_schema(schema, context)

        if schema.multiple_of is not None and schema.multiple_of <= 0:
            raise ResolutionError(f"multipleOf must be greater than zero ({context})")
        if schema.enum is not None:
            if not schema.enum:
                raise ResolutionError(f"Empty enum on {context}")
            for literal in schema.enum:
                if not _literal_matches(host, literal):
                    raise ResolutionError(
                        f"Enum literal {literal!r} on {context} does not match type {host.name}"
                    )

        numeric = {"multipleOf": schema.multiple_of, "minimum": schema.minimum, "maximum": schema.maximum}
        textual = {"maxLength": schema.max_length, "minLength": schema.min_length, "pattern": schema.pattern}
        for keyword, value in numeric.items():
            if value is not None and not host.is_numeric:
                raise ResolutionError(f"{keyword} applies to numeric types only; {context} is {host.name}")
        for keyword, value in textual.items():
            if value is not None and not host.is_text:
                raise ResolutionError(f"{keyword} applies to string types only; {context} is {host.name}")

        validations.max_length = schema.max_length
        validations.min_length = schema.min_length
        validations.pattern = schema.pattern
        validations.multiple_of = schema.multiple_of
        validations.minimum = schema.minimum
        validations.exclusive_minimum = schema.exclusive_minimum
        validations.maximum = schema.maximum
        validations.exclusive_maximum = schema.exclusive_maximum
        validations.enum = list(schema.enum) if schema.enum is not None else None


def _literal_matches(host: "GoType", literal: Any) -> bool:
    from ..languages.go.types import GoKind

    if host.kind == GoKind.BOOLEAN:
        return isinstance(literal, bool)
    if isinstance(literal, bool):
        return False
    if host.kind == GoKind.INTEGER:
        return isinstance(literal, int)
    if host.kind == GoKind.FLOAT:
        return isinstance(literal, (int, float))
    return isinstance(literal, str)


def _snake_file_name(go_name: str) -> str:
    chars = []
    for i, ch in enumerate(go_name):
        if ch.isupper() and i > 0 and (not go_name[i - 1].isupper() or (
            i + 1 < len(go_name) and go_name[i + 1].islower()
        )):
            chars.append("_")
        chars.append(ch.lower())
    return "".join(chars).replace("__", "_")
