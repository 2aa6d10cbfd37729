"""
Base generator interface for all code generation targets.

Defines the contract a target generator implements and the error-handling
wrapper used by the CLI.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Any, Optional
from pathlib import Path

from ...logging_config import get_logger
from .config import GeneratorConfig
from .templates import TemplateEngine, create_template_engine

logger = get_logger(__name__)


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize generator with optional configuration."""
        self.config = config or GeneratorConfig()
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        template_dir = self.get_template_directory()
        if template_dir:
            self._template_engine = create_template_engine(template_dir)
        else:
            self._template_engine = create_template_engine()
        for name, content in self.get_builtin_templates().items():
            self._template_engine.add_template(name, content)

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'go')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.go')."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Return None to use in-memory templates only.
        """
        return None

    def get_builtin_templates(self) -> Dict[str, str]:
        """In-memory templates registered on the engine at start-up."""
        return {}

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @abstractmethod
    def generate(self, spec) -> Dict[str, str]:
        """
        Generate every output file for a spec document.

        Args:
            spec: Loaded SpecDocument

        Returns:
            Mapping of relative output path to file content
        """
        pass

    def validate_spec(self, spec) -> List[str]:
        """
        Check the document for problems worth reporting without failing.

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []
        if not spec.definitions:
            warnings.append("Spec declares no definitions")
        if not spec.paths:
            warnings.append("Spec declares no paths")
        return warnings

    def format_code(self, code: str) -> str:
        """
        Normalize whitespace in generated code.

        Trailing spaces are dropped, runs of blank lines collapse to one and
        the file ends with exactly one newline.
        """
        formatted_lines = []
        blank_count = 0

        for line in code.split("\n"):
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 1:
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines).strip("\n") + "\n"

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render a template with context."""
        return self.template_engine.render_template(template_name, context)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        files: Dict[str, str],
        warnings: Optional[List[str]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize generation result.

        Args:
            files: Generated files keyed by relative path
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.files = files
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @classmethod
    def error(cls, message: str, exception: Optional[Exception] = None) -> "GenerationResult":
        """Create a failed generation result. Failed runs carry no files."""
        result = cls(files={})
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(generator: CodeGenerator, spec) -> GenerationResult:
    """
    Generate code using the specified generator with error handling.

    Any failure aborts the whole run: the result then holds no files.

    Args:
        generator: Code generator instance
        spec: Loaded SpecDocument

    Returns:
        GenerationResult with files, warnings, and metadata
    """
    try:
        warnings = generator.validate_spec(spec)
        files = generator.generate(spec)
        formatted = {path: generator.format_code(code) for path, code in files.items()}

        metadata = {
            "language": generator.language_name,
            "file_extension": generator.file_extension,
            "file_count": len(formatted),
            "definition_count": len(spec.definitions),
            "operation_count": sum(1 for _ in spec.operations()),
        }
        logger.info("Generated %d files", len(formatted))
        return GenerationResult(formatted, warnings, metadata)

    except Exception as e:
        logger.error("Code generation failed: %s", e, exc_info=True)
        return GenerationResult.error(f"Code generation failed: {e}", exception=e)
