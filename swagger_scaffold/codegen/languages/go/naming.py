"""
Go-specific naming utilities and sanitization.

Handles Go reserved words, builtins, and the identifiers a generated
handler already owns.
"""

import re
from typing import Iterable, Optional

from ...core.naming import NameSanitizer, caps


# Go reserved words
GO_RESERVED_WORDS = {
    "break",
    "case",
    "chan",
    "const",
    "continue",
    "default",
    "defer",
    "else",
    "fallthrough",
    "for",
    "func",
    "go",
    "goto",
    "if",
    "import",
    "interface",
    "map",
    "package",
    "range",
    "return",
    "select",
    "struct",
    "switch",
    "type",
    "var",
}

# Go builtin types and functions
GO_BUILTIN_TYPES = {
    "bool",
    "byte",
    "complex64",
    "complex128",
    "error",
    "float32",
    "float64",
    "int",
    "int8",
    "int16",
    "int32",
    "int64",
    "rune",
    "string",
    "uint",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "uintptr",
    "append",
    "cap",
    "close",
    "complex",
    "copy",
    "delete",
    "imag",
    "len",
    "make",
    "new",
    "panic",
    "print",
    "println",
    "real",
    "recover",
}

# Locals every generated handler declares itself
HANDLER_LOCALS = {"c", "err", "v", "resp", "body", "http", "strconv", "gin", "models", "operations"}


def create_go_sanitizer(extra_reserved: Optional[Iterable[str]] = None) -> NameSanitizer:
    """Create a name sanitizer configured for Go."""
    reserved = set(GO_RESERVED_WORDS)
    if extra_reserved:
        reserved.update(extra_reserved)
    return NameSanitizer(reserved, GO_BUILTIN_TYPES)


def exported_name(name: str) -> str:
    """Exported Go identifier for a spec-provided name (``photoUrls`` -> ``PhotoUrls``)."""
    cleaned = re.sub(r"[^a-zA-Z0-9_]", "_", name).strip("_")
    if not cleaned:
        cleaned = "Field"
    if cleaned[0].isdigit():
        cleaned = f"X{cleaned}"
    return caps(cleaned)


def validate_go_package_name(name: str) -> list[str]:
    """
    Validate Go package name according to Go naming rules.

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not name:
        errors.append("Package name cannot be empty")
        return errors

    if not name.isidentifier():
        errors.append(f"'{name}' is not a valid Go identifier")

    if name[0].isupper():
        errors.append("Package names should be lowercase")

    if "-" in name:
        errors.append("Package names should not contain hyphens")

    if name in GO_RESERVED_WORDS:
        errors.append(f"'{name}' is a Go reserved word")

    return errors
