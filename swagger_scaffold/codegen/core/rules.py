"""
Per-field validation chains.

``ValidationRuleCompiler.compile`` turns one GenSchema into an ordered
chain of steps. Emitters render the chain into target source;
``evaluate_chain`` runs the same chain against a Python value so the
generator can check sample literals from the document.
"""

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

from .formats import FormatRegistry, FormatValidator
from .schema import GenSchema

BODY_LOCATION = "body"


class RuleKind(Enum):
    """Validation rules in canonical evaluation order, cheapest first."""

    MULTIPLE_OF = "multipleOf"
    MINIMUM = "minimum"
    MAXIMUM = "maximum"
    MAX_LENGTH = "maxLength"
    MIN_LENGTH = "minLength"
    PATTERN = "pattern"
    ENUM = "enum"
    FORMAT = "format"


CANONICAL_ORDER: Tuple[RuleKind, ...] = tuple(RuleKind)


@dataclass(frozen=True)
class ValidationStep:
    """
    One check in a chain.

    ``value`` holds the rule argument: the factor, bound, length limit,
    pattern text, enum literal list or format name.
    """

    kind: RuleKind
    value: Any
    exclusive: bool = False
    validator: Optional[FormatValidator] = None


@dataclass(frozen=True)
class ValidationChain:
    """Ordered steps for one field, plus its empty-skip guard."""

    field: str
    location: str
    skip_when_empty: bool
    steps: Tuple[ValidationStep, ...] = ()

    def __iter__(self):
        return iter(self.steps)

    def __len__(self) -> int:
        return len(self.steps)

    @property
    def enum_step(self) -> Optional[ValidationStep]:
        for step in self.steps:
            if step.kind == RuleKind.ENUM:
                return step
        return None


@dataclass(frozen=True)
class ValidationFailure:
    """Structured result of a failed check."""

    field: str
    location: str
    rule: str
    value: Any
    constraint: Any = None

    @property
    def message(self) -> str:
        if self.rule == RuleKind.ENUM.value:
            return f"{self.field} in {self.location} should be one of {self.constraint!r}"
        if self.rule == "type":
            return f"{self.field} in {self.location} has the wrong type: {self.value!r}"
        return f"{self.field} in {self.location} fails {self.rule} {self.constraint!r}: {self.value!r}"


class ValidationRuleCompiler:
    """Compile GenSchemas into validation chains."""

    def __init__(self, registry: FormatRegistry, location: str = BODY_LOCATION):
        self.registry = registry
        self.location = location

    def compile(self, gen_schema: GenSchema) -> ValidationChain:
        """Return the ordered chain for one field; empty when it has no validations."""
        sv = gen_schema.shared_validations
        host = gen_schema.resolved_type.host
        skip = not sv.required and host.zero_literal is not None

        if not sv.has_validations:
            return ValidationChain(gen_schema.name, self.location, skip)

        candidates = {
            RuleKind.MULTIPLE_OF: sv.multiple_of,
            RuleKind.MINIMUM: sv.minimum,
            RuleKind.MAXIMUM: sv.maximum,
            RuleKind.MAX_LENGTH: sv.max_length,
            RuleKind.MIN_LENGTH: sv.min_length,
            RuleKind.PATTERN: sv.pattern,
            RuleKind.ENUM: sv.enum,
            RuleKind.FORMAT: sv.extended_format,
        }

        steps = []
        for kind in CANONICAL_ORDER:
            value = candidates[kind]
            if value is None:
                continue
            if kind == RuleKind.MINIMUM:
                steps.append(ValidationStep(kind, value, exclusive=sv.exclusive_minimum))
            elif kind == RuleKind.MAXIMUM:
                steps.append(ValidationStep(kind, value, exclusive=sv.exclusive_maximum))
            elif kind == RuleKind.FORMAT:
                steps.append(ValidationStep(kind, value, validator=self.registry.get(value)))
            elif kind == RuleKind.ENUM:
                steps.append(ValidationStep(kind, tuple(value)))
            else:
                steps.append(ValidationStep(kind, value))

        return ValidationChain(gen_schema.name, self.location, skip, tuple(steps))


def is_empty_value(value: Any) -> bool:
    """Zero value of a text or numeric host type."""
    if isinstance(value, str):
        return value == ""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return value == 0
    return False


def same_literal(a: Any, b: Any) -> bool:
    """Equality by native type: ``True`` never matches ``1`` and ``"1"`` never matches ``1``."""
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    if _is_number(a) and _is_number(b):
        return a == b
    return type(a) is type(b) and a == b


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_multiple_of(step: ValidationStep, value: Any) -> bool:
    quotient = value / step.value
    if math.isinf(quotient):
        return False
    return quotient == math.trunc(quotient)


def _check_minimum(step: ValidationStep, value: Any) -> bool:
    return value > step.value if step.exclusive else value >= step.value


def _check_maximum(step: ValidationStep, value: Any) -> bool:
    return value < step.value if step.exclusive else value <= step.value


def _check_max_length(step: ValidationStep, value: Any) -> bool:
    return len(value) <= step.value


def _check_min_length(step: ValidationStep, value: Any) -> bool:
    return len(value) >= step.value


def _check_pattern(step: ValidationStep, value: Any) -> bool:
    try:
        return re.search(step.value, value) is not None
    except re.error:
        # Go RE2 syntax that Python cannot compile; left to the generated code
        return True


def _check_enum(step: ValidationStep, value: Any) -> bool:
    return any(same_literal(candidate, value) for candidate in step.value)


_NUMERIC_RULES = {RuleKind.MULTIPLE_OF, RuleKind.MINIMUM, RuleKind.MAXIMUM}
_TEXT_RULES = {RuleKind.MAX_LENGTH, RuleKind.MIN_LENGTH, RuleKind.PATTERN}

_CHECKS = {
    RuleKind.MULTIPLE_OF: _check_multiple_of,
    RuleKind.MINIMUM: _check_minimum,
    RuleKind.MAXIMUM: _check_maximum,
    RuleKind.MAX_LENGTH: _check_max_length,
    RuleKind.MIN_LENGTH: _check_min_length,
    RuleKind.PATTERN: _check_pattern,
    RuleKind.ENUM: _check_enum,
}


def evaluate_chain(chain: ValidationChain, value: Any) -> Optional[ValidationFailure]:
    """
    Run a chain against a Python value, stopping at the first failure.

    Extended-format steps are not evaluated here; they belong to the
    predicate library the generated code links against.

    Returns:
        The first failure, or None when every evaluated step passes
    """
    if chain.skip_when_empty and is_empty_value(value):
        return None

    for step in chain.steps:
        check = _CHECKS.get(step.kind)
        if check is None:
            continue
        if step.kind in _NUMERIC_RULES and not _is_number(value):
            return ValidationFailure(chain.field, chain.location, "type", value)
        if step.kind in _TEXT_RULES and not isinstance(value, str):
            return ValidationFailure(chain.field, chain.location, "type", value)
        if not check(step, value):
            constraint = list(step.value) if step.kind == RuleKind.ENUM else step.value
            return ValidationFailure(chain.field, chain.location, step.kind.value, value, constraint)

    return None
