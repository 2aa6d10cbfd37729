"""
Go/gin code generator implementation.

Generates one model file per definition, an operations package of stubs
and a server file with the route table and request handlers.
"""

import re
from typing import Dict, List, Optional

from ....logging_config import get_logger
from ....spec import Operation, SpecDocument
from ...core.config import GeneratorConfig, get_config_manager
from ...core.formats import create_default_registry
from ...core.generator import CodeGenerator, GeneratorError
from ...core.rules import ValidationRuleCompiler, evaluate_chain
from ...core.schema import SchemaResolver
from .models import ModelEmitter
from .operations import OperationEmitter
from .syntax import GoFile, group_imports
from .types import GoTypeConfig, GoTypeMapper

logger = get_logger(__name__)

GENERATED_NOTICE = "Code generated by swagger-scaffold. DO NOT EDIT."

DEFAULT_SERVER_PACKAGE = "restapi"

HEADER_TEMPLATE = """\
{% if header_comment %}
{{ header_comment | comment }}

{% endif %}
package {{ package_name }}
{% if import_groups %}

import (
{% for group in import_groups %}
{% if not loop.first %}

{% endif %}
{% for imp in group %}
\t{{ imp }}
{% endfor %}
{% endfor %}
)
{% endif %}
"""


class GinGenerator(CodeGenerator):
    """Code generator for gin services with validated Go models."""

    def __init__(self, config: Optional[GeneratorConfig] = None, type_config: Optional[GoTypeConfig] = None):
        """Initialize the generator; the type mapper and format registry come from config."""
        super().__init__(config)

        self.type_mapper = GoTypeMapper(type_config)
        self.registry = create_default_registry(
            self.config.format_validators, govalidator_import=self.config.govalidator_import
        )
        self.compiler = ValidationRuleCompiler(self.registry)

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "go"

    @property
    def file_extension(self) -> str:
        """Return Go file extension."""
        return ".go"

    def get_builtin_templates(self) -> Dict[str, str]:
        return {"header.go.j2": HEADER_TEMPLATE}

    def generate(self, spec: SpecDocument) -> Dict[str, str]:
        """
        Generate every output file.

        Resolution errors propagate: a failed run produces no files at all.
        """
        outputs: List[GoFile] = []

        if self.config.skip_models:
            logger.info("Skipping model generation")
        else:
            resolver = self._resolver(spec)
            emitter = ModelEmitter(self.compiler, self.config)
            for name in self.selected_definitions(spec):
                model = emitter.emit(resolver.resolve(name, spec.definitions[name]))
                model.header_comment = GENERATED_NOTICE
                outputs.append(model)

        if self.config.skip_operations:
            logger.info("Skipping operation generation")
        else:
            operations = self.selected_operations(spec)
            if operations:
                emitter = OperationEmitter(self.config, self.type_mapper, spec.definitions)
                plans = emitter.plan(operations)
                server = emitter.emit_server(plans, self.server_package(spec))
                server.header_comment = GENERATED_NOTICE
                outputs.append(server)
                outputs.append(emitter.emit_operations(plans))
            else:
                logger.warning("No operations selected; server and operations files not generated")

        files: Dict[str, str] = {}
        for output in outputs:
            if output.path in files:
                raise GeneratorError(f"Two outputs map to the same file: {output.path}")
            files[output.path] = self.render_file(output)
        return files

    def render_file(self, output: GoFile) -> str:
        """Prefix a file body with its header comment, package clause and imports."""
        header = self.render_template(
            "header.go.j2",
            {
                "header_comment": output.header_comment,
                "package_name": output.package,
                "import_groups": group_imports(output.imports),
            },
        )
        return header + "\n" + output.body

    def selected_definitions(self, spec: SpecDocument) -> List[str]:
        """Definition names to emit, in declaration order."""
        allowed = set(self.config.include_models)
        return [name for name in spec.definitions if not allowed or name in allowed]

    def selected_operations(self, spec: SpecDocument) -> List[Operation]:
        """Operations to emit, in document order, after the id and tag allow-lists."""
        ids = set(self.config.include_operations)
        tags = set(self.config.include_tags)
        selected = []
        for _, operation in spec.operations():
            if ids and operation.operation_id not in ids:
                continue
            if tags and operation.route_group not in tags:
                continue
            selected.append(operation)
        return selected

    def server_package(self, spec: SpecDocument) -> str:
        """Configured server package, else the lowercased spec title, else ``restapi``."""
        if self.config.server_package:
            return self.config.server_package
        candidate = re.sub(r"[^a-z0-9]", "", spec.title.lower())
        if not candidate or candidate[0].isdigit():
            return DEFAULT_SERVER_PACKAGE
        return candidate

    def validate_spec(self, spec: SpecDocument) -> List[str]:
        """Collect non-fatal problems: config issues, ignored methods, unknown allow-list entries and bad samples."""
        warnings = super().validate_spec(spec)
        warnings.extend(get_config_manager().validate_config(self.config))

        for entry in spec.ignored:
            warnings.append(f"Unsupported method ignored: {entry}")

        known_ops = {op.operation_id for _, op in spec.operations()}
        for op_id in self.config.include_operations:
            if op_id not in known_ops:
                warnings.append(f"include_operations: unknown operation '{op_id}'")
        for name in self.config.include_models:
            if name not in spec.definitions:
                warnings.append(f"include_models: unknown definition '{name}'")

        if not self.config.skip_models:
            warnings.extend(self._sample_warnings(spec))

        return warnings

    def _resolver(self, spec: SpecDocument) -> SchemaResolver:
        return SchemaResolver(spec.definitions, self.registry, self.type_mapper, self.config.model_package)

    def _sample_warnings(self, spec: SpecDocument) -> List[str]:
        """Check ``example`` and ``default`` literals against their own constraints."""
        warnings = []
        resolver = self._resolver(spec)
        for name in self.selected_definitions(spec):
            definition = resolver.resolve(name, spec.definitions[name])
            for prop in definition.validating_properties:
                chain = self.compiler.compile(prop)
                for label, sample in (("example", prop.example), ("default", prop.default)):
                    if sample is None:
                        continue
                    failure = evaluate_chain(chain, sample)
                    if failure is not None:
                        warnings.append(f"{name}.{prop.name} {label}: {failure.message}")
        return warnings


def create_gin_generator(config: Optional[GeneratorConfig] = None, **overrides) -> GinGenerator:
    """
    Create a generator from a config object and/or keyword overrides.

    Args:
        config: Base configuration (defaults when omitted)
        **overrides: GeneratorConfig fields to replace

    Returns:
        Configured GinGenerator instance
    """
    if overrides:
        base = {} if config is None else {k: v for k, v in vars(config).items()}
        base.update(overrides)
        config = get_config_manager().get_config(base)
    return GinGenerator(config)
