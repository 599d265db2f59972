"""
Design (repository.py)
- Purpose: Own the ordered list of IP rows and every state transition on them
           (edit, lookup, add, remove), so the UI never mutates rows directly.
- Inputs: An async lookup callable (ip -> LookupResult) and optional change/lookup hooks.
- Outputs: Row snapshots in display order.
- Side effects: Awaits the lookup callable; fires on_change after each mutation.
- Thread-safety: Single event-loop thread. The only suspension point is the awaited
                 lookup inside lookup_row; everything else runs to completion.
"""

import itertools
import logging
from typing import Awaitable, Callable, Iterator, List

from .config import LOOKUP_FALLBACK_MESSAGE
from .models import IpRow, LookupResult, RowStatus
from .validation import is_valid_ip

logger = logging.getLogger(__name__)

LookupFunc = Callable[[str], Awaitable[LookupResult]]
# (row_id, ip, status, detail) -> None
LookupHook = Callable[[int, str, str, str | None], None]


def error_message(exc: BaseException) -> str:
    """Use the exception's own message when it has one; otherwise the fixed fallback."""
    if isinstance(exc, Exception):
        message = str(exc).strip()
        if message:
            return message
    return LOOKUP_FALLBACK_MESSAGE


class RowCollection:
    """
    Design (RowCollection)
    - State:
        _rows: [IpRow] in insertion (display) order
        _ids: per-instance id generator; ids are never reused
    - Row state machine:
        edit      : any -> same, except success/error -> idle (result/error cleared)
        lookup    : idle/error/success -> loading, only for a non-empty valid trimmed ip,
                    and not when the row already holds a success for that exact ip
        settle    : loading -> success(result) | error(message), only if the row still exists
    - Two lookups racing on one row both reach the gateway; the later settlement wins.
    """

    def __init__(
        self,
        lookup: LookupFunc,
        on_change: Callable[[], None] | None = None,
        on_lookup: LookupHook | None = None,
        id_factory: Iterator[int] | None = None,
    ) -> None:
        self._lookup = lookup
        self.on_change = on_change
        self.on_lookup = on_lookup
        self._ids = id_factory if id_factory is not None else itertools.count(1)
        self._rows: List[IpRow] = [self._create_row()]

    # -------- Reading --------

    @property
    def rows(self) -> List[IpRow]:
        """Snapshot list of rows (the IpRow objects themselves are live)."""
        return list(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def get(self, row_id: int) -> IpRow | None:
        for row in self._rows:
            if row.id == row_id:
                return row
        return None

    # -------- Mutations --------

    def add_row(self) -> None:
        self._rows.append(self._create_row())
        self._changed()

    def update_row_ip(self, row_id: int, ip: str) -> None:
        """
        Purpose: Store the typed text. Editing a row that shows a result or an error
                 resets it to idle, since that result no longer matches the input.
        """
        row = self.get(row_id)
        if row is None:
            return
        row.ip = ip
        if row.status in (RowStatus.SUCCESS, RowStatus.ERROR):
            row.status = RowStatus.IDLE
            row.result = None
            row.error = None
        self._changed()

    async def lookup_row(self, row_id: int) -> None:
        """
        Purpose: Look up the row's IP and settle it to success or error.
        Side effects: The row is already `loading` by the time the first await suspends.
        Errors: Never raised to the caller; they become the row's error message.
        """
        row = self.get(row_id)
        if row is None:
            return

        ip = row.ip.strip()
        if not ip or not is_valid_ip(ip):
            return

        if row.status == RowStatus.SUCCESS and row.result is not None and row.result.ip == ip:
            return

        row.status = RowStatus.LOADING
        row.result = None
        row.error = None
        self._changed()
        self._notify_lookup(row.id, ip, RowStatus.LOADING, None)

        try:
            result = await self._lookup(ip)
        except Exception as exc:
            message = error_message(exc)
            logger.warning("lookup for %s failed: %s", ip, message)
            if not self._contains(row):
                return
            row.status = RowStatus.ERROR
            row.result = None
            row.error = message
            self._changed()
            self._notify_lookup(row.id, ip, RowStatus.ERROR, message)
            return

        if not self._contains(row):
            logger.debug("row %s removed before lookup for %s settled", row.id, ip)
            return
        row.status = RowStatus.SUCCESS
        row.result = result
        row.error = None
        self._changed()
        self._notify_lookup(row.id, ip, RowStatus.SUCCESS, result.country)

    def remove_row(self, row_id: int) -> None:
        for index, row in enumerate(self._rows):
            if row.id == row_id:
                del self._rows[index]
                self._changed()
                return

    # -------- Internals --------

    def _create_row(self) -> IpRow:
        return IpRow(id=next(self._ids))

    def _contains(self, row: IpRow) -> bool:
        return any(existing is row for existing in self._rows)

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def _notify_lookup(self, row_id: int, ip: str, status: str, detail: str | None) -> None:
        if self.on_lookup is not None:
            self.on_lookup(row_id, ip, status, detail)
