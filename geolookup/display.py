"""
Design (display.py)
- Purpose: Decide what one row of the form shows, independent of Tkinter, so the
           presentation rules can be tested without a display.
- Inputs: IpRow, its 1-based position, and whether its input currently has focus.
- Outputs: RowDisplay (plain values the UI copies into widgets).
- Side effects: None.
"""

from dataclasses import dataclass

from .models import IpRow, RowStatus
from .utils import country_code_to_flag
from .validation import validate_ip_text


@dataclass(frozen=True)
class RowDisplay:
    label: str
    input_enabled: bool
    input_invalid: bool
    validation_error: str | None
    loading: bool
    country: str = ""
    city: str = ""
    flag: str = ""
    timezone: str | None = None
    error: str = ""


def describe_row(row: IpRow, index: int, focused: bool = False) -> RowDisplay:
    """
    Rules:
    - the validation hint only shows while the input is not focused and holds
      non-empty invalid text;
    - the input is disabled while a lookup is in flight;
    - result fields only on success, the error text only on error.
    """
    state = validate_ip_text(row.ip)
    show_hint = not focused and not state.is_empty and not state.is_valid

    display = dict(
        label=f"{index}.",
        input_enabled=row.status != RowStatus.LOADING,
        input_invalid=show_hint,
        validation_error=state.validation_error if show_hint else None,
        loading=row.status == RowStatus.LOADING,
    )
    if row.status == RowStatus.SUCCESS and row.result is not None:
        display.update(
            country=row.result.country,
            city=row.result.city or "",
            flag=country_code_to_flag(row.result.country_code),
            timezone=row.result.timezone,
        )
    elif row.status == RowStatus.ERROR and row.error:
        display.update(error=row.error)
    return RowDisplay(**display)


def should_lookup(text: str) -> bool:
    """Blur/Enter only request a lookup for non-empty, valid input."""
    state = validate_ip_text(text)
    return not state.is_empty and state.is_valid
