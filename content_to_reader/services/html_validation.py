"""Lenient HTML validity check.

The goal isn't to check whether HTML is strictly conformant but whether it's
correct enough to be interpreted and rendered by a reader device. Missing
doctypes, entity sloppiness and similar cosmetic issues are ignored;
truncated markup is always fatal and a handful of structural errors (stray
or misnested tags) are tolerated up to a configurable threshold.
"""

from dataclasses import dataclass, field
from typing import List

import html5lib
import logfire

from content_to_reader.config import get_settings

# Errors a browser silently recovers from without visible damage
_IGNORED_ERRORS = frozenset(
    (
        "expected-doctype-but-got-start-tag",
        "expected-doctype-but-got-end-tag",
        "expected-doctype-but-got-chars",
        "expected-doctype-but-got-eof",
        "unknown-doctype",
        "unexpected-doctype",
        "named-entity-without-semicolon",
        "numeric-entity-without-semicolon",
        "expected-named-entity",
        "illegal-windows-1252-entity",
        "non-void-element-with-trailing-solidus",
        "duplicate-attribute",
        "invalid-codepoint",
        # A bare "<" in text or an XML declaration
        "expected-tag-name",
        "expected-tag-name-but-got-question-mark",
        "expected-tag-name-but-got-right-bracket",
    )
)

# Markup cut off in the middle of a tag, attribute or comment
_FATAL_ERROR_PREFIXES = (
    "eof-in-",
    "expected-end-of-tag-instead-of-eof",
    "expected-attribute-value-but-got-eof",
    "expected-attribute-name-but-got-eof",
    "unexpected-EOF-after-solidus-in-tag",
)


@dataclass
class HtmlValidationReport:
    """Result of ``check_html``."""

    valid: bool
    fatal: List[str] = field(default_factory=list)
    structural: List[str] = field(default_factory=list)


def _is_fatal(code: str) -> bool:
    return code.startswith(_FATAL_ERROR_PREFIXES)


def check_html(
    snippet: str, max_errors: int | None = None, fragment: bool = False
) -> HtmlValidationReport:
    """Check whether ``snippet`` is valid enough to render.

    Args:
        snippet: HTML document or fragment
        max_errors: Structural errors tolerated (defaults to settings.max_html_errors)
        fragment: Parse as a body fragment instead of a whole document

    Returns:
        Report with the fatal and structural error codes found
    """
    if max_errors is None:
        max_errors = get_settings().max_html_errors

    parser = html5lib.HTMLParser(strict=False)
    if fragment:
        parser.parseFragment(snippet)
    else:
        parser.parse(snippet)

    fatal: List[str] = []
    structural: List[str] = []
    for _position, code, _datavars in parser.errors:
        if code in _IGNORED_ERRORS:
            continue
        if _is_fatal(code):
            fatal.append(code)
        else:
            structural.append(code)

    valid = not fatal and len(structural) <= max_errors
    if not valid:
        logfire.debug(
            "HTML failed validity check",
            fatal=fatal,
            structural=structural,
            max_errors=max_errors,
        )
    return HtmlValidationReport(valid=valid, fatal=fatal, structural=structural)


def is_html_valid(snippet: str, max_errors: int | None = None, fragment: bool = False) -> bool:
    """Return ``True`` if ``snippet`` is valid enough to be rendered."""
    return check_html(snippet, max_errors=max_errors, fragment=fragment).valid
