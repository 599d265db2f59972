"""
Design (models.py)
- Purpose: Define simple, typed data structures for domain entities (LookupResult, IpRow).
- Inputs: Field values (str) or a decoded JSON payload.
- Outputs: Dataclass instances.
- Side effects: None.
- Thread-safety: Dataclasses are plain containers; RowCollection owns all mutation.
"""

from dataclasses import dataclass
from typing import Any, Mapping


class RowStatus:
    """Lookup state of a single row."""
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class LookupResult:
    """
    Design (LookupResult)
    - Purpose: Geolocation payload returned by the lookup backend for one IP.
    - Fields:
        ip: address as echoed by the backend.
        country: country name (e.g. "United States").
        country_code: ISO 3166 alpha-2 code; used for the flag glyph.
        timezone: IANA zone name driving the row clock.
        city: optional city name (None when the backend has none).
    """
    ip: str
    country: str
    country_code: str
    timezone: str
    city: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "LookupResult":
        """
        Purpose: Build a LookupResult from a decoded JSON body.
        Outputs: LookupResult; extra keys are ignored, empty city becomes None.
        Raises: ValueError when the payload is not a mapping or a required field is missing/not a string.
        """
        if not isinstance(payload, Mapping):
            raise ValueError("lookup payload must be an object")
        fields = {}
        for name in ("ip", "country", "country_code", "timezone"):
            value = payload.get(name)
            if not isinstance(value, str):
                raise ValueError(f"lookup payload field {name!r} missing or not a string")
            fields[name] = value
        city = payload.get("city")
        if city is not None and not isinstance(city, str):
            raise ValueError("lookup payload field 'city' must be a string or null")
        return cls(city=city or None, **fields)


@dataclass
class IpRow:
    """
    Design (IpRow)
    - Purpose: One user-entered IP address and its lookup state.
    - Fields:
        id: unique per collection, never reused.
        ip: free text exactly as typed.
        status: one of RowStatus.*.
        result: set only when status == success.
        error: set only when status == error.
    """
    id: int
    ip: str = ""
    status: str = RowStatus.IDLE
    result: LookupResult | None = None
    error: str | None = None
