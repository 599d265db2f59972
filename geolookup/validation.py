"""
Design (validation.py)
- Purpose: Classify free text as a syntactically valid IPv4/IPv6 address, and derive
           the empty / valid / error-message view the UI shows under each input.
- Inputs: Strings (or a zero-arg callable returning the current string).
- Outputs: bools and an optional error message.
- Side effects: None.
- Thread-safety: Stateless; safe to call from anywhere.

Note: the IPv6 grammar below does not accept the bare unspecified address "::".
That gap is known and kept as-is.
"""

import re
from typing import Callable, NamedTuple

from .config import VALIDATION_ERROR_MESSAGE

_OCTET = r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)"
_IPV4 = rf"(?:{_OCTET}\.){{3}}{_OCTET}"
_H16 = r"[0-9a-fA-F]{1,4}"

IPV4_PATTERN = re.compile(_IPV4)

IPV6_PATTERN = re.compile(
    "|".join(
        (
            rf"(?:{_H16}:){{7}}{_H16}",
            rf"(?:{_H16}:){{1,7}}:",
            rf"(?:{_H16}:){{1,6}}:{_H16}",
            rf"(?:{_H16}:){{1,5}}(?::{_H16}){{1,2}}",
            rf"(?:{_H16}:){{1,4}}(?::{_H16}){{1,3}}",
            rf"(?:{_H16}:){{1,3}}(?::{_H16}){{1,4}}",
            rf"(?:{_H16}:){{1,2}}(?::{_H16}){{1,5}}",
            rf"{_H16}:(?::{_H16}){{1,6}}",
            rf":(?::{_H16}){{1,7}}",
            rf"::(?:[fF]{{4}}:)?{_IPV4}",
        )
    )
)


def is_valid_ip(text: str) -> bool:
    """
    Purpose: True iff text is a dotted-quad IPv4 or colon-hex IPv6 address.
    Inputs: text (not trimmed; surrounding whitespace makes it invalid).
    Outputs: bool.
    """
    if not text:
        return False
    return bool(IPV4_PATTERN.fullmatch(text) or IPV6_PATTERN.fullmatch(text))


class ValidationState(NamedTuple):
    is_empty: bool
    is_valid: bool
    validation_error: str | None


def validate_ip_text(text: str) -> ValidationState:
    """Empty input is not an error; anything else must pass is_valid_ip once trimmed."""
    # judged on the trimmed text, the same text RowCollection.lookup_row gates on
    stripped = (text or "").strip()
    if not stripped:
        return ValidationState(True, True, None)
    if is_valid_ip(stripped):
        return ValidationState(False, True, None)
    return ValidationState(False, False, VALIDATION_ERROR_MESSAGE)


class IpValidation:
    """
    Design (IpValidation)
    - Purpose: Derived view over a live text value. Every property is recomputed on read,
               so it always reflects whatever `source` currently returns.
    - Inputs: source, a zero-arg callable returning the current text (e.g. tk.StringVar.get).
    """

    def __init__(self, source: Callable[[], str]):
        self._source = source

    def _state(self) -> ValidationState:
        return validate_ip_text(self._source())

    @property
    def is_empty(self) -> bool:
        return self._state().is_empty

    @property
    def is_valid(self) -> bool:
        return self._state().is_valid

    @property
    def validation_error(self) -> str | None:
        return self._state().validation_error
