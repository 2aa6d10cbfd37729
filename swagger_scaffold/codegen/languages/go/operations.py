"""
Go route table, handler and operation stub emission.

Operations are grouped into gin router groups by their first tag. Every
operation gets a route entry, a handler that decodes and checks its
parameters, and a stub in the operations package for hand-written logic.
"""

import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Set

from ....logging_config import get_logger
from ....spec import Operation, ParamLocation, Parameter, SpecError
from ...core.config import GeneratorConfig
from ...core.naming import NamingCase, lower_first
from ...core.printer import Printer
from ...core.schema import ResolutionError
from .naming import GO_BUILTIN_TYPES, GO_RESERVED_WORDS, HANDLER_LOCALS, create_go_sanitizer, exported_name
from .syntax import GoFile, align_columns, go_quote
from .types import GoKind, GoType, GoTypeMapper

logger = get_logger(__name__)

_PATH_PARAM = re.compile(r"\{([^{}]+)\}")

_TEXT_READERS = {
    ParamLocation.PATH: "c.Param",
    ParamLocation.QUERY: "c.Query",
    ParamLocation.HEADER: "c.GetHeader",
    ParamLocation.FORM_DATA: "c.PostForm",
}

_ARRAY_READERS = {
    ParamLocation.QUERY: "c.QueryArray",
    ParamLocation.FORM_DATA: "c.PostFormArray",
}


def route_path(path: str, tag: str) -> str:
    """
    Path registered on the tag's router group.

    The ``/<tag>`` prefix is stripped when it is a whole leading segment
    and ``{name}`` segments become gin's ``:name``.
    """
    prefix = "/" + tag
    if path == prefix or path.startswith(prefix + "/"):
        path = path[len(prefix):]
    return _PATH_PARAM.sub(r":\1", path)


@dataclass
class HandlerParam:
    """A parameter together with the Go names the handler uses for it."""

    param: Parameter
    go_type: GoType
    local: str
    text_local: Optional[str] = None
    model: Optional[str] = None

    @property
    def needs_parse(self) -> bool:
        return self.go_type.kind in (GoKind.INTEGER, GoKind.FLOAT, GoKind.BOOLEAN)


@dataclass
class ResponseType:
    """Go return type of an operation stub."""

    go_type: GoType
    zero: str
    uses_models: bool = False


@dataclass
class OperationPlan:
    """Everything emitted for one operation."""

    operation: Operation
    group: str
    route: str
    func_name: str
    params: List[HandlerParam]
    response: Optional[ResponseType]

    @property
    def handler_name(self) -> str:
        return self.func_name + "Handler"


def _respond_bad_request(pr: Printer, key: str, name: str) -> None:
    pr.p("c.JSON(http.StatusBadRequest, gin.H{", go_quote(key), ": ", go_quote(name), "})")
    pr.p("return")


def _write_parse(pr: Printer, hp: HandlerParam) -> None:
    kind = hp.go_type.kind
    if kind == GoKind.INTEGER:
        call = f"strconv.ParseInt({hp.text_local}, 10, {hp.go_type.bits})"
    elif kind == GoKind.FLOAT:
        call = f"strconv.ParseFloat({hp.text_local}, {hp.go_type.bits})"
    else:
        call = f"strconv.ParseBool({hp.text_local})"

    pr.p("if v, err := ", call, "; err != nil {")
    with pr.indent():
        _respond_bad_request(pr, "invalid", hp.param.name)
    pr.p("} else {")
    with pr.indent():
        pr.p(hp.local, " = ", hp.go_type.name, "(v)")
    pr.p("}")


def _decode_text(pr: Printer, hp: HandlerParam, check_missing: bool = True) -> None:
    """Read a single textual value and, for non-string types, parse it."""
    reader = _TEXT_READERS[hp.param.location]
    target = hp.text_local if hp.needs_parse else hp.local
    pr.p(target, " := ", reader, "(", go_quote(hp.param.name), ")")

    if check_missing and hp.param.required:
        pr.p("if ", target, ' == "" {')
        with pr.indent():
            _respond_bad_request(pr, "missing", hp.param.name)
        pr.p("}")

    if not hp.needs_parse:
        return

    pr.p("var ", hp.local, " ", hp.go_type.name)
    if hp.param.required:
        _write_parse(pr, hp)
    else:
        # absent optional values keep their zero value
        pr.p("if ", hp.text_local, ' != "" {')
        with pr.indent():
            _write_parse(pr, hp)
        pr.p("}")


def _decode_array(pr: Printer, hp: HandlerParam) -> None:
    location = hp.param.location
    if location not in _ARRAY_READERS:
        raise ResolutionError(
            f"Array parameter '{hp.param.name}' is only supported in query or formData, not {location.value}"
        )
    pr.p(hp.local, " := ", _ARRAY_READERS[location], "(", go_quote(hp.param.name), ")")
    if hp.param.required:
        pr.p("if len(", hp.local, ") == 0 {")
        with pr.indent():
            _respond_bad_request(pr, "missing", hp.param.name)
        pr.p("}")


def _decode_file(pr: Printer, hp: HandlerParam) -> None:
    pr.p(hp.local, ", err := c.FormFile(", go_quote(hp.param.name), ")")
    if hp.param.required:
        pr.p("if err != nil {")
        with pr.indent():
            _respond_bad_request(pr, "missing", hp.param.name)
    else:
        pr.p("if err != nil && err != http.ErrMissingFile {")
        with pr.indent():
            _respond_bad_request(pr, "invalid", hp.param.name)
    pr.p("}")


def _decode_path(pr: Printer, hp: HandlerParam) -> None:
    if hp.go_type.kind == GoKind.ARRAY:
        _decode_array(pr, hp)
        return
    # gin never matches a route with an empty path segment
    _decode_text(pr, hp, check_missing=False)


def _decode_query(pr: Printer, hp: HandlerParam) -> None:
    if hp.go_type.kind == GoKind.ARRAY:
        _decode_array(pr, hp)
    else:
        _decode_text(pr, hp)


def _decode_header(pr: Printer, hp: HandlerParam) -> None:
    if hp.go_type.kind == GoKind.ARRAY:
        _decode_array(pr, hp)
    else:
        _decode_text(pr, hp)


def _decode_form_data(pr: Printer, hp: HandlerParam) -> None:
    if hp.go_type.kind == GoKind.FILE:
        _decode_file(pr, hp)
    elif hp.go_type.kind == GoKind.ARRAY:
        _decode_array(pr, hp)
    else:
        _decode_text(pr, hp)


def _decode_body(pr: Printer, hp: HandlerParam) -> None:
    pr.p("var ", hp.local, " ", hp.model)
    pr.p("if err := c.ShouldBindJSON(&", hp.local, "); err != nil {")
    with pr.indent():
        _respond_bad_request(pr, "invalid", hp.param.name)
    pr.p("}")
    pr.p("if err := ", hp.local, ".Validate(); err != nil {")
    with pr.indent():
        pr.p("c.JSON(http.StatusBadRequest, err)")
        pr.p("return")
    pr.p("}")


_DECODERS: Dict[ParamLocation, Callable[[Printer, HandlerParam], None]] = {
    ParamLocation.PATH: _decode_path,
    ParamLocation.QUERY: _decode_query,
    ParamLocation.HEADER: _decode_header,
    ParamLocation.FORM_DATA: _decode_form_data,
    ParamLocation.BODY: _decode_body,
}


class OperationEmitter:
    """
    Emit the server file (route table plus handlers) and the operations file.

    Args:
        config: Generator settings (package names and import paths)
        type_mapper: Maps parameter and response schemas to Go types
        definitions: Names of the definitions models exist for
    """

    def __init__(self, config: GeneratorConfig, type_mapper: GoTypeMapper, definitions: Iterable[str]):
        self.config = config
        self.type_mapper = type_mapper
        self.definitions = set(definitions)
        self.models = config.model_package
        self.ops = config.operations_package

    def plan(self, operations: Iterable[Operation]) -> List[OperationPlan]:
        """Resolve names and types for each operation, in the given order."""
        plans = []
        seen: Dict[str, Operation] = {}
        for operation in operations:
            func_name = exported_name(operation.operation_id)
            if func_name in seen:
                other = seen[func_name]
                raise SpecError(
                    f"Operations {other.method.upper()} {other.path} and "
                    f"{operation.method.upper()} {operation.path} both map to '{func_name}'"
                )
            seen[func_name] = operation

            group = operation.route_group
            plans.append(
                OperationPlan(
                    operation=operation,
                    group=group,
                    route=route_path(operation.path, group),
                    func_name=func_name,
                    params=self._handler_params(operation),
                    response=self._response_type(operation),
                )
            )
        logger.debug("Planned %d operations in %d route groups", len(plans), len(self._groups(plans)))
        return plans

    def emit_server(self, plans: List[OperationPlan], package: str) -> GoFile:
        """Render the route table and one handler per operation."""
        pr = Printer()
        groups = self._groups(plans)

        pr.p("var (")
        with pr.indent():
            for line in align_columns([[exported_name(tag), "*gin.RouterGroup"] for tag in groups]):
                pr.p(line)
        pr.p(")")
        pr.p()

        pr.p("// AddRoutes registers every handler on its router group.")
        pr.p("func AddRoutes() {")
        with pr.indent():
            for i, (tag, members) in enumerate(groups.items()):
                if i:
                    pr.p()
                for plan in members:
                    pr.p(
                        exported_name(tag), ".", plan.operation.method.upper(), "(",
                        go_quote(plan.route), ", ", plan.handler_name, ")",
                    )
        pr.p("}")
        pr.p()

        imports = {"net/http", self.config.gin_import, self.config.import_path(self.ops)}
        for plan in plans:
            self._write_handler(pr, plan)
            for hp in plan.params:
                if hp.needs_parse:
                    imports.add("strconv")
                if hp.model:
                    imports.add(self.config.import_path(self.models))

        return GoFile(path=f"{package}/restapi.go", package=package, body=pr.getvalue(), imports=imports)

    def emit_operations(self, plans: List[OperationPlan]) -> GoFile:
        """Render one placeholder function per operation."""
        pr = Printer()
        imports: Set[str] = set()

        for plan in plans:
            signature = []
            taken = {hp.local for hp in plan.params if not hp.model} | HANDLER_LOCALS | {self.models}
            for hp in plan.params:
                if hp.model:
                    name = lower_first(hp.go_type.name)
                    if name in taken or name in GO_RESERVED_WORDS or name in GO_BUILTIN_TYPES:
                        name += "Body"
                    signature.append(f"{name} *{hp.model}")
                    imports.add(self.config.import_path(self.models))
                else:
                    signature.append(f"{hp.local} {hp.go_type.name}")
                imports.update(hp.go_type.imports_needed)

            op = plan.operation
            if self.config.add_comments:
                summary = " ".join((op.summary or "").split())
                pr.p("// ", plan.func_name, " handles ", op.method.upper(), " ", op.path, ".")
                if summary:
                    pr.p("// ", summary)

            params = ", ".join(signature)
            if plan.response is None:
                pr.p("func ", plan.func_name, "(", params, ") error {")
                with pr.indent():
                    pr.p("return nil")
            else:
                pr.p("func ", plan.func_name, "(", params, ") (", plan.response.go_type.name, ", error) {")
                with pr.indent():
                    pr.p("return ", plan.response.zero, ", nil")
                if plan.response.uses_models:
                    imports.add(self.config.import_path(self.models))
                imports.update(plan.response.go_type.imports_needed)
            pr.p("}")
            pr.p()

        return GoFile(
            path=f"{self.ops}/operations.go",
            package=self.ops,
            body=pr.getvalue(),
            imports=imports,
        )

    @staticmethod
    def _groups(plans: List[OperationPlan]) -> Dict[str, List[OperationPlan]]:
        groups: Dict[str, List[OperationPlan]] = {}
        for plan in plans:
            groups.setdefault(plan.group, []).append(plan)
        return groups

    def _write_handler(self, pr: Printer, plan: OperationPlan) -> None:
        pr.p("func ", plan.handler_name, "(c *gin.Context) {")
        with pr.indent():
            for hp in plan.params:
                _DECODERS[hp.param.location](pr, hp)
                pr.p()

            args = ", ".join("&" + hp.local if hp.model else hp.local for hp in plan.params)
            call = f"{self.ops}.{plan.func_name}({args})"
            if plan.response is None:
                pr.p("if err := ", call, "; err != nil {")
                with pr.indent():
                    pr.p("c.Status(http.StatusBadRequest)")
                    pr.p("return")
                pr.p("}")
                pr.p("c.Status(http.StatusOK)")
            else:
                pr.p("resp, err := ", call)
                pr.p("if err != nil {")
                with pr.indent():
                    pr.p("c.Status(http.StatusBadRequest)")
                    pr.p("return")
                pr.p("}")
                pr.p("c.JSON(http.StatusOK, resp)")
        pr.p("}")
        pr.p()

    def _handler_params(self, operation: Operation) -> List[HandlerParam]:
        sanitizer = create_go_sanitizer(HANDLER_LOCALS | {self.models, self.ops})
        assigned: Set[str] = set()
        params = []

        for param in operation.ordered_parameters():
            if param.location == ParamLocation.BODY:
                params.append(self._body_param(operation, param))
                continue

            go_type = self.type_mapper.map_parameter(param)
            if go_type.kind == GoKind.FILE and param.location != ParamLocation.FORM_DATA:
                raise ResolutionError(f"File parameter '{param.name}' must be in formData ({operation.operation_id})")

            local = sanitizer.sanitize_name(param.name, NamingCase.CAMEL_CASE)
            if local in assigned:
                local = sanitizer.sanitize_name(param.name + "_" + param.location.value, NamingCase.CAMEL_CASE)
            assigned.add(local)

            hp = HandlerParam(param=param, go_type=go_type, local=local)
            if hp.needs_parse:
                hp.text_local = sanitizer.sanitize_name("str_" + local, NamingCase.CAMEL_CASE)
            params.append(hp)

        return params

    def _body_param(self, operation: Operation, param: Parameter) -> HandlerParam:
        schema = param.schema
        if schema is None or not schema.ref:
            raise ResolutionError(
                f"Body parameter '{param.name}' of {operation.operation_id} must reference a definition"
            )
        self._require_definition(schema.ref, operation)
        go_name = exported_name(schema.ref)
        return HandlerParam(
            param=param,
            go_type=GoType(go_name, GoKind.MODEL),
            local="body",
            model=f"{self.models}.{go_name}",
        )

    def _response_type(self, operation: Operation) -> Optional[ResponseType]:
        schema = operation.success_schema()
        if schema is None:
            return None

        context = f"{operation.operation_id} response"
        if schema.ref:
            self._require_definition(schema.ref, operation)
            host = self.type_mapper.map_schema(schema, context)
            name = f"*{host.qualified(self.models)}"
            return ResponseType(GoType(name, GoKind.MODEL), f"&{host.qualified(self.models)}{{}}", uses_models=True)

        if schema.type == "array":
            item_ref = schema.items.ref if schema.items is not None else None
            if item_ref:
                self._require_definition(item_ref, operation)
            host = self.type_mapper.map_schema(schema, context)
            name = host.qualified(self.models)
            return ResponseType(
                GoType(name, GoKind.ARRAY, imports_needed=host.imports_needed),
                name + "{}",
                uses_models=bool(item_ref),
            )

        host = self.type_mapper.map_schema(schema, context)
        return ResponseType(host, _zero_value(host))

    def _require_definition(self, name: str, operation: Operation) -> None:
        if name not in self.definitions:
            raise ResolutionError(f"Unresolved reference '{name}' in {operation.operation_id}")


def _zero_value(go_type: GoType) -> str:
    if go_type.kind == GoKind.BOOLEAN:
        return "false"
    if go_type.kind == GoKind.TEMPORAL:
        return go_type.name + "{}"
    return go_type.zero_literal
