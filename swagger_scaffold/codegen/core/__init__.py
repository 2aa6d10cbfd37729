"""
Core code generation components.

Provides the base generator, descriptors, validation chains and the
printer used by the Go emitters.
"""

from .generator import CodeGenerator, GeneratorError, GenerationResult, generate_code
from .schema import (
    GenDefinition,
    GenSchema,
    ResolutionError,
    ResolvedType,
    SchemaResolver,
    SharedValidations,
)
from .rules import (
    RuleKind,
    ValidationChain,
    ValidationFailure,
    ValidationRuleCompiler,
    ValidationStep,
    evaluate_chain,
)
from .formats import FormatRegistry, FormatValidator, create_default_registry
from .printer import Printer, PrinterError
from .naming import NameSanitizer, NamingCase, caps, lower_first
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GeneratorError",
    "GenerationResult",
    "generate_code",
    # Generation descriptors
    "GenDefinition",
    "GenSchema",
    "ResolutionError",
    "ResolvedType",
    "SchemaResolver",
    "SharedValidations",
    # Validation chains
    "RuleKind",
    "ValidationChain",
    "ValidationFailure",
    "ValidationRuleCompiler",
    "ValidationStep",
    "evaluate_chain",
    # Extended formats
    "FormatRegistry",
    "FormatValidator",
    "create_default_registry",
    # Output
    "Printer",
    "PrinterError",
    # Naming utilities - language-agnostic
    "NameSanitizer",
    "NamingCase",
    "caps",
    "lower_first",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
