"""
Extended string formats and the predicates that check them.

The registry is a static table from a Swagger ``format`` name to the Go
function that validates it. The generator only asks two questions of it:
whether a format has a predicate, and what that predicate is called.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

GOVALIDATOR_IMPORT = "github.com/asaskevich/govalidator"

# govalidator TagMap names -> predicate function
GOVALIDATOR_FUNCS: Dict[str, str] = {
    "email": "IsEmail",
    "url": "IsURL",
    "dialstring": "IsDialString",
    "requrl": "IsRequestURL",
    "requri": "IsRequestURI",
    "alpha": "IsAlpha",
    "utfletter": "IsUTFLetter",
    "alphanum": "IsAlphanumeric",
    "utfletternum": "IsUTFLetterNumeric",
    "numeric": "IsNumeric",
    "utfnumeric": "IsUTFNumeric",
    "utfdigit": "IsUTFDigit",
    "hexadecimal": "IsHexadecimal",
    "hexcolor": "IsHexcolor",
    "rgbcolor": "IsRGBcolor",
    "lowercase": "IsLowerCase",
    "uppercase": "IsUpperCase",
    "int": "IsInt",
    "float": "IsFloat",
    "null": "IsNull",
    "uuid": "IsUUID",
    "uuidv3": "IsUUIDv3",
    "uuidv4": "IsUUIDv4",
    "uuidv5": "IsUUIDv5",
    "creditcard": "IsCreditCard",
    "isbn10": "IsISBN10",
    "isbn13": "IsISBN13",
    "json": "IsJSON",
    "multibyte": "IsMultibyte",
    "ascii": "IsASCII",
    "printableascii": "IsPrintableASCII",
    "fullwidth": "IsFullWidth",
    "halfwidth": "IsHalfWidth",
    "variablewidth": "IsVariableWidth",
    "base64": "IsBase64",
    "datauri": "IsDataURI",
    "ip": "IsIP",
    "port": "IsPort",
    "ipv4": "IsIPv4",
    "ipv6": "IsIPv6",
    "dns": "IsDNSName",
    "host": "IsHost",
    "mac": "IsMAC",
    "latitude": "IsLatitude",
    "longitude": "IsLongitude",
    "ssn": "IsSSN",
    "semver": "IsSemver",
    "rfc3339": "IsRFC3339",
    "ISO3166Alpha2": "IsISO3166Alpha2",
    "ISO3166Alpha3": "IsISO3166Alpha3",
}


@dataclass(frozen=True)
class FormatValidator:
    """A Go predicate ``func(string) bool`` for one format."""

    format: str
    func: str
    import_path: str

    @property
    def package(self) -> str:
        return self.import_path.rstrip("/").rsplit("/", 1)[-1]

    @property
    def identifier(self) -> str:
        """Qualified name used at the call site, e.g. ``govalidator.IsEmail``."""
        return f"{self.package}.{self.func}"


class FormatRegistry:
    """Lookup table of extended-format validators."""

    def __init__(self, validators: Optional[Iterable[FormatValidator]] = None):
        self._validators: Dict[str, FormatValidator] = {}
        for validator in validators or ():
            self.register(validator)

    def register(self, validator: FormatValidator) -> None:
        self._validators[validator.format] = validator

    def has_predicate(self, fmt: Optional[str]) -> bool:
        return bool(fmt) and fmt in self._validators

    def get(self, fmt: str) -> FormatValidator:
        return self._validators[fmt]

    def identifier(self, fmt: str) -> str:
        return self._validators[fmt].identifier


def create_default_registry(
    extra: Optional[Dict[str, Dict[str, str]]] = None,
    govalidator_import: str = GOVALIDATOR_IMPORT,
) -> FormatRegistry:
    """
    Registry with every govalidator predicate plus configured extras.

    Args:
        extra: ``{format: {"func": name, "import": path}}`` overrides
        govalidator_import: Import path used for the govalidator entries

    Returns:
        Populated FormatRegistry
    """
    registry = FormatRegistry(
        FormatValidator(fmt, func, govalidator_import) for fmt, func in GOVALIDATOR_FUNCS.items()
    )
    for fmt, entry in (extra or {}).items():
        if not isinstance(entry, dict) or not entry.get("func") or not entry.get("import"):
            # reported by ConfigManager.validate_config
            continue
        registry.register(FormatValidator(fmt, entry["func"], entry["import"]))
    return registry
