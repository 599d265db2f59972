"""
Design (config.py)
- Purpose: Centralize constants and configuration.
- Inputs: Environment variables GEOLOOKUP_API_BASE_URL and GEOLOOKUP_LOG_LEVEL (optional).
- Outputs: Constants (URLs, intervals, messages, icon file name).
- Side effects: Reads os.environ once at import.
- Thread-safety: N/A (read-only constants).
"""

import os

# Lookup backend. In development the backend listens on :8080.
API_BASE_URL = os.environ.get("GEOLOOKUP_API_BASE_URL", "http://localhost:8080").rstrip("/")
LOOKUP_PATH = "/api/lookup/"

# Shared clock tick (seconds) and how often the asyncio loop pumps Tk events
TICK_INTERVAL_SEC = 1.0
UI_POLL_INTERVAL_SEC = 0.02

# maximum number of log lines kept in the Logs panel (oldest trimmed)
LOG_MAX_LINES = 1000
LOG_LEVEL = os.environ.get("GEOLOOKUP_LOG_LEVEL", "INFO").upper()

## Fixed user-facing messages
VALIDATION_ERROR_MESSAGE = "Invalid IP address format"
LOOKUP_FALLBACK_MESSAGE = "Lookup failed"
ERROR_BODY_UNPARSABLE_MESSAGE = "Failed to parse error response"
NETWORK_ERROR_MESSAGE = "Network error"
MALFORMED_RESPONSE_MESSAGE = "Malformed lookup response"

WINDOW_TITLE = "IP Lookup"
CARD_DESCRIPTION = "Enter an IP address to look up its country, city and local time."
EMPTY_STATE_MESSAGE = "No IP addresses added yet. Click \"Add\" to start."

ICON_FILE = "logo.ico"  # Expected at geolookup/icons/logo.ico (added to the exe with --add-data)
