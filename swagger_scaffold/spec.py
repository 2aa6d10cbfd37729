"""
Read-only model of a Swagger 2.0 document.

Converts the raw JSON/YAML mapping into typed records the generators
walk. Key order from the source document is preserved everywhere:
paths, properties and definitions come out in declaration order.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .logging_config import get_logger

logger = get_logger(__name__)

DEFINITIONS_PREFIX = "#/definitions/"
PARAMETERS_PREFIX = "#/parameters/"

# Emission order for the operations of one path
HTTP_METHODS = ("post", "get", "put", "delete")

_IGNORED_METHODS = ("patch", "head", "options")


class SpecError(Exception):
    """The document is malformed or uses an unsupported construct."""

    pass


class ParamLocation(Enum):
    """Where a request parameter is read from."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    FORM_DATA = "formData"
    BODY = "body"


@dataclass
class Schema:
    """One schema node: a definition, a property or an items/body schema."""

    name: str = ""
    type: Optional[str] = None
    format: Optional[str] = None
    ref: Optional[str] = None
    items: Optional["Schema"] = None
    properties: Dict[str, "Schema"] = field(default_factory=dict)
    required: List[str] = field(default_factory=list)
    description: Optional[str] = None

    # Validation constraints
    max_length: Optional[int] = None
    min_length: Optional[int] = None
    pattern: Optional[str] = None
    multiple_of: Optional[float] = None
    minimum: Optional[float] = None
    exclusive_minimum: bool = False
    maximum: Optional[float] = None
    exclusive_maximum: bool = False
    enum: Optional[List[Any]] = None

    # Sample values, checked against the constraints for warnings
    example: Any = None
    default: Any = None

    @property
    def is_object(self) -> bool:
        return self.type == "object" or (self.type is None and bool(self.properties))


@dataclass
class Parameter:
    """A single operation parameter."""

    name: str
    location: ParamLocation
    required: bool = False
    type: Optional[str] = None
    format: Optional[str] = None
    items: Optional[Schema] = None
    schema: Optional[Schema] = None  # body parameters only
    description: Optional[str] = None


@dataclass
class Response:
    """A declared response for one status code."""

    description: str = ""
    schema: Optional[Schema] = None


@dataclass
class Operation:
    """One HTTP method on one path."""

    operation_id: str
    method: str
    path: str
    tags: List[str] = field(default_factory=list)
    parameters: List[Parameter] = field(default_factory=list)
    responses: Dict[str, Response] = field(default_factory=dict)
    summary: Optional[str] = None
    description: Optional[str] = None

    @property
    def route_group(self) -> str:
        """The first tag; operations are grouped into routers by it."""
        if not self.tags:
            raise SpecError(
                f"Operation '{self.operation_id}' ({self.method.upper()} {self.path}) has no tags"
            )
        return self.tags[0]

    @property
    def body_parameter(self) -> Optional[Parameter]:
        for param in self.parameters:
            if param.location == ParamLocation.BODY:
                return param
        return None

    def ordered_parameters(self) -> List[Parameter]:
        """Parameters in declared order with the body parameter moved last."""
        others = [p for p in self.parameters if p.location != ParamLocation.BODY]
        body = self.body_parameter
        return others + [body] if body else others

    def success_schema(self) -> Optional[Schema]:
        """Schema of the 200 response, if it declares one."""
        response = self.responses.get("200")
        return response.schema if response else None


@dataclass
class PathItem:
    """Operations sharing one path, keyed by lowercase method."""

    path: str
    operations: Dict[str, Operation] = field(default_factory=dict)

    def __iter__(self) -> Iterator[Operation]:
        for method in HTTP_METHODS:
            if method in self.operations:
                yield self.operations[method]


@dataclass
class SpecDocument:
    """A loaded API description: ordered paths plus named definitions."""

    title: str = ""
    version: str = ""
    base_path: str = ""
    paths: Dict[str, PathItem] = field(default_factory=dict)
    definitions: Dict[str, Schema] = field(default_factory=dict)
    ignored: List[str] = field(default_factory=list)

    def operations(self) -> Iterator[Tuple[str, Operation]]:
        """Every operation as ``(path, operation)`` in document order."""
        for path, item in self.paths.items():
            for operation in item:
                yield path, operation

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "SpecDocument":
        """Build a document from a parsed Swagger 2.0 mapping."""
        if not isinstance(raw, dict):
            raise SpecError("Spec document must be a mapping")
        if "openapi" in raw:
            raise SpecError(f"OpenAPI {raw['openapi']} documents are not supported; expected Swagger 2.0")
        if raw.get("swagger") not in (None, "2.0"):
            logger.warning("Unexpected swagger version %r, continuing", raw.get("swagger"))

        info = raw.get("info") or {}
        doc = cls(
            title=str(info.get("title", "")),
            version=str(info.get("version", "")),
            base_path=str(raw.get("basePath", "")),
        )

        for name, node in (raw.get("definitions") or {}).items():
            doc.definitions[name] = parse_schema(node, name)

        shared_params = raw.get("parameters") or {}
        paths = raw.get("paths") or {}
        if not isinstance(paths, dict):
            raise SpecError("'paths' must be a mapping")

        for path, node in paths.items():
            if not isinstance(node, dict):
                raise SpecError(f"Path item for {path} must be a mapping")
            item = PathItem(path=path)
            path_params = [_parse_parameter(p, shared_params, path) for p in node.get("parameters", [])]

            for method in HTTP_METHODS:
                if method in node:
                    item.operations[method] = _parse_operation(
                        node[method], method, path, path_params, shared_params
                    )
            for method in _IGNORED_METHODS:
                if method in node:
                    doc.ignored.append(f"{method.upper()} {path}")
            doc.paths[path] = item

        logger.debug(
            "Parsed spec '%s': %d paths, %d definitions", doc.title, len(doc.paths), len(doc.definitions)
        )
        return doc


def parse_schema(node: Dict[str, Any], name: str = "") -> Schema:
    """Convert one raw schema mapping into a Schema."""
    if not isinstance(node, dict):
        raise SpecError(f"Schema '{name}' must be a mapping")

    ref = node.get("$ref")
    if ref and ref.startswith(DEFINITIONS_PREFIX):
        ref = ref[len(DEFINITIONS_PREFIX):]

    items = node.get("items")
    properties = {
        prop_name: parse_schema(prop_node, prop_name)
        for prop_name, prop_node in (node.get("properties") or {}).items()
    }

    return Schema(
        name=name,
        type=node.get("type"),
        format=node.get("format"),
        ref=ref,
        items=parse_schema(items, f"{name}Items") if isinstance(items, dict) else None,
        properties=properties,
        required=list(node.get("required") or []),
        description=node.get("description"),
        max_length=node.get("maxLength"),
        min_length=node.get("minLength"),
        pattern=node.get("pattern"),
        multiple_of=node.get("multipleOf"),
        minimum=node.get("minimum"),
        exclusive_minimum=bool(node.get("exclusiveMinimum", False)),
        maximum=node.get("maximum"),
        exclusive_maximum=bool(node.get("exclusiveMaximum", False)),
        enum=list(node["enum"]) if node.get("enum") is not None else None,
        example=node.get("example"),
        default=node.get("default"),
    )


def _parse_parameter(node: Dict[str, Any], shared: Dict[str, Any], path: str) -> Parameter:
    if "$ref" in node:
        ref = node["$ref"]
        key = ref[len(PARAMETERS_PREFIX):] if ref.startswith(PARAMETERS_PREFIX) else None
        if key is None or key not in shared:
            raise SpecError(f"Unresolved parameter reference {ref} on {path}")
        node = shared[key]

    if "name" not in node:
        raise SpecError(f"Parameter without a name on {path}")

    try:
        location = ParamLocation(node.get("in"))
    except ValueError:
        raise SpecError(f"Parameter '{node['name']}' on {path} has unsupported location {node.get('in')!r}") from None

    schema = node.get("schema")
    items = node.get("items")
    return Parameter(
        name=node["name"],
        location=location,
        # path parameters are always required in Swagger 2.0
        required=bool(node.get("required", False)) or location == ParamLocation.PATH,
        type=node.get("type"),
        format=node.get("format"),
        items=parse_schema(items, node["name"]) if isinstance(items, dict) else None,
        schema=parse_schema(schema, node["name"]) if isinstance(schema, dict) else None,
        description=node.get("description"),
    )


def _parse_operation(
    node: Dict[str, Any],
    method: str,
    path: str,
    path_params: List[Parameter],
    shared_params: Dict[str, Any],
) -> Operation:
    operation_id = node.get("operationId")
    if not operation_id:
        raise SpecError(f"{method.upper()} {path} has no operationId")

    own = [_parse_parameter(p, shared_params, path) for p in node.get("parameters", [])]
    overridden = {(p.name, p.location) for p in own}
    inherited = [p for p in path_params if (p.name, p.location) not in overridden]
    bodies = [p.name for p in inherited + own if p.location == ParamLocation.BODY]
    if len(bodies) > 1:
        raise SpecError(f"{method.upper()} {path} declares more than one body parameter: {', '.join(bodies)}")

    responses = {}
    for status, resp in (node.get("responses") or {}).items():
        resp = resp or {}
        schema = resp.get("schema")
        responses[str(status)] = Response(
            description=resp.get("description", ""),
            schema=parse_schema(schema, f"{operation_id}Response") if isinstance(schema, dict) else None,
        )

    return Operation(
        operation_id=operation_id,
        method=method,
        path=path,
        tags=list(node.get("tags") or []),
        parameters=inherited + own,
        responses=responses,
        summary=node.get("summary"),
        description=node.get("description"),
    )
