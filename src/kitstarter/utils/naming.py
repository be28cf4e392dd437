"""Project name validation and identifier derivation.

Turns the raw name typed by the user into the identifiers the template
expects:

- kebab-case: directory name and npm package name (``widget-shop``)
- camelCase: JavaScript variables (``widgetShop``)
- PascalCase: type and class names (``WidgetShop``)
- Title Case: human readable titles (``Widget Shop``)

All derivations are pure functions. :class:`ProjectIdentifier` computes them
together so the forms can never disagree.

Examples:
    >>> identifier = ProjectIdentifier.from_name("widget-shop")
    >>> identifier.pascal
    'WidgetShop'
    >>> dict(identifier.template_variables())["PROJECT_NAME_TITLE"]
    'Widget Shop'
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from kitstarter.errors import InvalidNameError

MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 50

RESERVED_NAMES = frozenset({"node", "npm", "pnpm", "yarn", "test", "src", "dist", "build"})

_VALID_NAME = re.compile(r"^[A-Za-z0-9_-]+$")
_NON_ALPHANUMERIC_RUN = re.compile(r"[^a-z0-9]+")
_TITLE_SEPARATORS = re.compile(r"[-_]")


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of :func:`validate_name`.

    Truthy when the name is acceptable. ``message`` explains the first
    failing rule otherwise.
    """

    ok: bool
    message: str | None = None

    def __bool__(self) -> bool:
        return self.ok

    def for_prompt(self) -> bool | str:
        """Return ``True`` or the failure message, the shape questionary validators expect."""
        return True if self.ok else self.message


def validate_name(value: str | None) -> ValidationResult:
    """Check a raw project name against the naming policy.

    The value is stripped before checking. Rules are applied in order and the
    first failure wins: non-empty, allowed characters, length bounds, not a
    reserved word (case-insensitive).

    Args:
        value: Raw user input

    Returns:
        ValidationResult describing the outcome
    """
    if value is None or not value.strip():
        return ValidationResult(False, "Project name is required")

    trimmed = value.strip()

    if not _VALID_NAME.match(trimmed):
        return ValidationResult(
            False, "Project name should only contain letters, numbers, hyphens, and underscores"
        )

    # "--" or "__" would normalize to an empty directory name
    if not to_kebab_case(trimmed):
        return ValidationResult(False, "Project name should contain at least one letter or number")

    if len(trimmed) < MIN_NAME_LENGTH:
        return ValidationResult(
            False, f"Project name should be at least {MIN_NAME_LENGTH} characters long"
        )

    if len(trimmed) > MAX_NAME_LENGTH:
        return ValidationResult(
            False, f"Project name should be at most {MAX_NAME_LENGTH} characters long"
        )

    if trimmed.lower() in RESERVED_NAMES:
        return ValidationResult(
            False, f'"{trimmed}" is a reserved name. Please choose a different name.'
        )

    return ValidationResult(True)


def to_kebab_case(value: str) -> str:
    """Lowercase ``value`` and collapse every non-alphanumeric run into one hyphen.

    >>> to_kebab_case("My Cool App!")
    'my-cool-app'
    """
    return _NON_ALPHANUMERIC_RUN.sub("-", value.lower()).strip("-")


def _segments(value: str) -> list[str]:
    return [segment for segment in value.split("-") if segment]


def _upper_first(segment: str) -> str:
    return segment[:1].upper() + segment[1:]


def to_camel_case(value: str) -> str:
    """Join hyphen-delimited segments, capitalizing every segment after the first.

    >>> to_camel_case("my-cool-app")
    'myCoolApp'
    """
    segments = _segments(value)
    if not segments:
        return ""
    return segments[0] + "".join(_upper_first(segment) for segment in segments[1:])


def to_pascal_case(value: str) -> str:
    """Join hyphen-delimited segments, capitalizing every segment.

    >>> to_pascal_case("my-cool-app")
    'MyCoolApp'
    """
    return "".join(_upper_first(segment) for segment in _segments(value))


def to_title_case(value: str) -> str:
    """Split on hyphens and underscores and render each word capitalized.

    >>> to_title_case("my-cool_app")
    'My Cool App'
    """
    words = [word for word in _TITLE_SEPARATORS.split(value) if word]
    return " ".join(word[:1].upper() + word[1:].lower() for word in words)


@dataclass(frozen=True)
class ProjectIdentifier:
    """All identifier forms of one project name.

    Attributes:
        raw: Name as entered (stripped)
        kebab: Canonical directory and package name
        camel: camelCase form of :attr:`kebab`
        pascal: PascalCase form of :attr:`kebab`
        title: Title Case form of :attr:`raw`
    """

    raw: str
    kebab: str
    camel: str
    pascal: str
    title: str

    @classmethod
    def from_name(cls, value: str) -> "ProjectIdentifier":
        """Validate ``value`` and derive every identifier form from it.

        Raises:
            InvalidNameError: If ``value`` fails :func:`validate_name`
        """
        result = validate_name(value)
        if not result:
            raise InvalidNameError(result.message)

        raw = value.strip()
        kebab = to_kebab_case(raw)
        return cls(
            raw=raw,
            kebab=kebab,
            camel=to_camel_case(kebab),
            pascal=to_pascal_case(kebab),
            title=to_title_case(raw),
        )

    def template_variables(self) -> Mapping[str, str]:
        """Return the read-only token mapping consumed by the materializer."""
        return MappingProxyType(
            {
                "PROJECT_NAME": self.kebab,
                "PROJECT_NAME_CAMEL": self.camel,
                "PROJECT_NAME_PASCAL": self.pascal,
                "PROJECT_NAME_TITLE": self.title,
            }
        )
