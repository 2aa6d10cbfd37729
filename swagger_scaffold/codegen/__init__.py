"""
swagger_scaffold code generation module.

Generates gin service scaffolding from a Swagger document.
"""

from .core.generator import CodeGenerator, GenerationResult, generate_code
from .core.config import GeneratorConfig, ConfigManager, load_config
from .languages.go import GinGenerator, create_gin_generator


def generate_from_spec(spec, config=None, **options):
    """
    Generate every output file for a loaded spec document.

    Args:
        spec: SpecDocument to generate from
        config: GeneratorConfig (defaults when omitted)
        **options: GeneratorConfig fields to override

    Returns:
        GenerationResult with the rendered files
    """
    generator = create_gin_generator(config, **options)
    return generate_code(generator, spec)


__all__ = [
    "CodeGenerator",
    "GenerationResult",
    "GeneratorConfig",
    "ConfigManager",
    "GinGenerator",
    "create_gin_generator",
    "generate_code",
    "generate_from_spec",
    "load_config",
]
