"""
Go model emission.

Renders one file per GenDefinition: the struct with its json/binding
tags, a fail-fast ``Validate`` method and one ``validate<Field>`` method
per field that carries constraints.
"""

import json
from typing import Callable, Dict, List, Set

from ...core.config import GeneratorConfig
from ...core.naming import lower_first
from ...core.printer import Printer
from ...core.rules import RuleKind, ValidationChain, ValidationRuleCompiler, ValidationStep
from ...core.schema import GenDefinition, GenSchema
from ....logging_config import get_logger
from .syntax import GoFile, align_columns, go_quote, go_raw

logger = get_logger(__name__)


class ModelEmitter:
    """Emit Go record declarations and their validators."""

    def __init__(self, compiler: ValidationRuleCompiler, config: GeneratorConfig):
        self.compiler = compiler
        self.config = config
        self._step_writers: Dict[RuleKind, Callable[[Printer, GenSchema, ValidationStep], None]] = {
            RuleKind.MULTIPLE_OF: self._write_multiple_of,
            RuleKind.MINIMUM: self._write_minimum,
            RuleKind.MAXIMUM: self._write_maximum,
            RuleKind.MAX_LENGTH: self._write_max_length,
            RuleKind.MIN_LENGTH: self._write_min_length,
            RuleKind.PATTERN: self._write_pattern,
            RuleKind.ENUM: self._write_enum_call,
            RuleKind.FORMAT: self._write_format,
        }

    def emit(self, definition: GenDefinition) -> GoFile:
        """Render one definition into a GoFile."""
        pr = Printer()
        imports: Set[str] = set(definition.default_imports)
        chains = [(prop, self.compiler.compile(prop)) for prop in definition.validating_properties]

        self._write_struct(pr, definition)
        self._write_validate(pr, definition, chains)

        for prop, chain in chains:
            enum_step = chain.enum_step
            if enum_step is not None:
                self._write_enum_cache(pr, definition, prop, enum_step)
                imports.update(("encoding/json", "sync"))
            self._write_field_validator(pr, definition, prop, chain)
            imports.update(self._chain_imports(chain))

        logger.debug("Emitted model %s (%d validators)", definition.go_name, len(chains))
        return GoFile(
            path=f"{definition.package}/{definition.file_name}.go",
            package=definition.package,
            body=pr.getvalue(),
            imports=imports,
        )

    def _chain_imports(self, chain: ValidationChain) -> Set[str]:
        imports = set()
        for step in chain:
            if step.kind == RuleKind.FORMAT:
                imports.add(step.validator.import_path)
                imports.add(self.config.errors_import)
            else:
                imports.add(self.config.validate_import)
        return imports

    def _write_struct(self, pr: Printer, definition: GenDefinition) -> None:
        description = definition.gen_schema.description
        if self.config.add_comments and description:
            for line in description.strip().splitlines():
                if line.strip():
                    pr.p("// ", line.strip())
                else:
                    pr.p("//")

        rows = [[prop.go_name, prop.resolved_type.host.name, self._tag(prop)] for prop in definition.properties]
        lines = align_columns(rows)

        if not lines:
            pr.p("type ", definition.go_name, " struct {")
            pr.p("}")
            pr.p()
            return

        pr.p("type ", definition.go_name, " struct {")
        with pr.indent():
            for prop, line in zip(definition.properties, lines):
                if self.config.add_comments and prop.description:
                    pr.p("// ", " ".join(prop.description.split()))
                pr.p(line)
        pr.p("}")
        pr.p()

    @staticmethod
    def _tag(prop: GenSchema) -> str:
        if prop.required:
            return f'`json:"{prop.name}" binding:"required"`'
        return f'`json:"{prop.name},omitempty"`'

    def _write_validate(self, pr: Printer, definition: GenDefinition, chains: List) -> None:
        pr.p("// Validate checks the field constraints of ", definition.go_name, ", stopping at the first failure.")
        pr.p("func (m *", definition.go_name, ") Validate() error {")
        with pr.indent():
            for prop, _ in chains:
                pr.p("if err := m.validate", prop.go_name, "(); err != nil {")
                with pr.indent():
                    pr.p("return err")
                pr.p("}")
                pr.p()
            pr.p("return nil")
        pr.p("}")
        pr.p()

    def _write_field_validator(
        self, pr: Printer, definition: GenDefinition, prop: GenSchema, chain: ValidationChain
    ) -> None:
        pr.p("func (m *", definition.go_name, ") validate", prop.go_name, "() error {")
        with pr.indent():
            if chain.skip_when_empty:
                pr.p("if m.", prop.go_name, " == ", prop.resolved_type.host.zero_literal, " {")
                with pr.indent():
                    pr.p("return nil")
                pr.p("}")
                pr.p()
            for step in chain:
                self._step_writers[step.kind](pr, prop, step)
                pr.p()
            pr.p("return nil")
        pr.p("}")
        pr.p()

    @staticmethod
    def _write_check(pr: Printer, *call) -> None:
        pr.p("if err := ", *call, "; err != nil {")
        with pr.indent():
            pr.p("return err")
        pr.p("}")

    def _write_multiple_of(self, pr: Printer, prop: GenSchema, step: ValidationStep) -> None:
        self._write_check(
            pr, "validate.MultipleOf(", go_quote(prop.name), ', "body", float64(m.', prop.go_name, "), ", step.value, ")"
        )

    def _write_minimum(self, pr: Printer, prop: GenSchema, step: ValidationStep) -> None:
        self._write_check(
            pr,
            "validate.Minimum(", go_quote(prop.name), ', "body", float64(m.', prop.go_name, "), ",
            step.value, ", ", step.exclusive, ")",
        )

    def _write_maximum(self, pr: Printer, prop: GenSchema, step: ValidationStep) -> None:
        self._write_check(
            pr,
            "validate.Maximum(", go_quote(prop.name), ', "body", float64(m.', prop.go_name, "), ",
            step.value, ", ", step.exclusive, ")",
        )

    def _write_max_length(self, pr: Printer, prop: GenSchema, step: ValidationStep) -> None:
        self._write_check(
            pr, "validate.MaxLength(", go_quote(prop.name), ', "body", string(m.', prop.go_name, "), ", step.value, ")"
        )

    def _write_min_length(self, pr: Printer, prop: GenSchema, step: ValidationStep) -> None:
        self._write_check(
            pr, "validate.MinLength(", go_quote(prop.name), ', "body", string(m.', prop.go_name, "), ", step.value, ")"
        )

    def _write_pattern(self, pr: Printer, prop: GenSchema, step: ValidationStep) -> None:
        self._write_check(
            pr, "validate.Pattern(", go_quote(prop.name), ', "body", string(m.', prop.go_name, "), ", go_raw(step.value), ")"
        )

    def _write_enum_call(self, pr: Printer, prop: GenSchema, step: ValidationStep) -> None:
        self._write_check(pr, "m.validate", prop.go_name, "Enum(", go_quote(prop.name), ', "body", m.', prop.go_name, ")")

    def _write_format(self, pr: Printer, prop: GenSchema, step: ValidationStep) -> None:
        pr.p("if !", step.validator.identifier, "(m.", prop.go_name, ") {")
        with pr.indent():
            pr.p(
                "return errors.InvalidType(", go_quote(prop.name), ', "body", ', go_quote(step.value),
                ", m.", prop.go_name, ")",
            )
        pr.p("}")

    def _write_enum_cache(self, pr: Printer, definition: GenDefinition, prop: GenSchema, step: ValidationStep) -> None:
        var = lower_first(definition.go_name) + prop.go_name + "Enum"
        host = prop.resolved_type.host.name
        literal = json.dumps(list(step.value), separators=(",", ":"), ensure_ascii=False)

        pr.p("var (")
        with pr.indent():
            for line in align_columns(
                [[var, "[]interface{}"], [var + "Once", "sync.Once"], [var + "Err", "error"]]
            ):
                pr.p(line)
        pr.p(")")
        pr.p()
        pr.p("func (m *", definition.go_name, ") validate", prop.go_name, "Enum(path, location string, value ", host, ") error {")
        with pr.indent():
            pr.p(var, "Once.Do(func() {")
            with pr.indent():
                pr.p("var res []", host)
                pr.p("if err := json.Unmarshal([]byte(", go_raw(literal), "), &res); err != nil {")
                with pr.indent():
                    pr.p(var, "Err = err")
                    pr.p("return")
                pr.p("}")
                pr.p("for _, v := range res {")
                with pr.indent():
                    pr.p(var, " = append(", var, ", v)")
                pr.p("}")
            pr.p("})")
            pr.p("if ", var, "Err != nil {")
            with pr.indent():
                pr.p("return ", var, "Err")
            pr.p("}")
            self._write_check(pr, "validate.Enum(path, location, value, ", var, ")")
            pr.p()
            pr.p("return nil")
        pr.p("}")
        pr.p()
