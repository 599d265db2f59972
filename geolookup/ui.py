"""
Design (ui.py)
- Purpose: Build and manage the Tkinter form (one line per IP row, Add/Remove, live clocks, Logs).
- Inputs: RowCollection (row state), TickScheduler (shared clock tick), spawn (schedules a coroutine).
- Outputs: None (renders UI, forwards user edits/lookups to RowCollection).
- Side effects: Creates windows; posts desktop notifications (plyer) on failed lookups.
- Thread-safety: Everything runs on the one thread that pumps both Tk and asyncio.
"""

import logging
import os
import tkinter as tk
from tkinter import ttk
from typing import Awaitable, Callable, Dict, List

from plyer import notification

from .clock import RowClock
from .config import (
    WINDOW_TITLE,
    CARD_DESCRIPTION,
    EMPTY_STATE_MESSAGE,
    ICON_FILE,
    LOG_MAX_LINES,
)
from .display import RowDisplay, describe_row, should_lookup
from .models import RowStatus
from .repository import RowCollection
from .ticks import TickScheduler
from .utils import get_icon_path, format_lookup_log

logger = logging.getLogger(__name__)

BG = "#1e1e1e"
FIELD_BG = "#2b2b2b"
FG = "#f0f0f0"
GREEN = "#7CFC00"
RED = "#FF6A6A"
ORANGE = "#FFA500"
MUTED = "gray"


class RowWidgets:
    """
    Design (RowWidgets)
    - Purpose: Widgets for one IpRow: index label, entry, result/status text, clock, remove button,
               and a validation hint line under the entry.
    - State:
        focused: whether the entry currently has keyboard focus (hint is hidden while focused)
        clock: RowClock fed by the row's timezone on success
        _syncing: set while the UI writes row.ip back into the entry, so the write is not
                  mistaken for a user edit
    """

    def __init__(self, parent: tk.Widget, row_id: int, scheduler: TickScheduler):
        self.row_id = row_id
        self.focused = False
        self._syncing = False

        self.frame = tk.Frame(parent, bg=BG)
        self.frame.columnconfigure(2, weight=1)

        self.label = tk.Label(self.frame, fg=FG, bg=BG, width=4, anchor="e")
        self.label.grid(row=0, column=0, padx=(0, 5), pady=2)

        self.ip_var = tk.StringVar()
        self.entry = tk.Entry(
            self.frame,
            textvariable=self.ip_var,
            width=40,
            bg=FIELD_BG,
            fg=FG,
            insertbackground=FG,
            disabledbackground="#333333",
            highlightthickness=1,
            highlightbackground=FIELD_BG,
            highlightcolor="#555555",
        )
        self.entry.grid(row=0, column=1, sticky="w", pady=2)

        self.result_label = tk.Label(self.frame, fg=FG, bg=BG, anchor="w")
        self.result_label.grid(row=0, column=2, sticky="ew", padx=8)

        self.clock_label = tk.Label(self.frame, fg=GREEN, bg=BG, width=9, font=("Consolas", 10))
        self.clock_label.grid(row=0, column=3, padx=5)

        self.remove_button = ttk.Button(self.frame, text="Remove", width=8)
        self.remove_button.grid(row=0, column=4, padx=(5, 0))

        self.hint_label = tk.Label(self.frame, fg=RED, bg=BG, anchor="w", font=("Segoe UI", 8))
        self.hint_label.grid(row=1, column=1, columnspan=2, sticky="w")
        self.hint_label.grid_remove()

        self.clock = RowClock(scheduler, on_change=lambda value: self.clock_label.configure(text=value))

    def render(self, display: RowDisplay, ip: str) -> None:
        self.label.configure(text=display.label)

        if self.ip_var.get() != ip:
            self._syncing = True
            try:
                self.ip_var.set(ip)
            finally:
                self._syncing = False

        self.entry.configure(state="normal" if display.input_enabled else "disabled")
        self.entry.configure(highlightbackground=RED if display.input_invalid else FIELD_BG)

        if display.validation_error:
            self.hint_label.configure(text=display.validation_error)
            self.hint_label.grid()
        else:
            self.hint_label.grid_remove()

        if display.loading:
            self.result_label.configure(text="Looking up...", fg=ORANGE)
        elif display.error:
            self.result_label.configure(text=display.error, fg=RED)
        elif display.country:
            text = f"{display.flag} {display.country}".strip()
            if display.city:
                text += f", {display.city}"
            self.result_label.configure(text=text, fg=FG)
        else:
            self.result_label.configure(text="", fg=FG)

        self.clock.set_timezone(display.timezone)

    @property
    def syncing(self) -> bool:
        return self._syncing

    def destroy(self) -> None:
        self.clock.dispose()
        self.frame.destroy()


class AppUI:
    """
    Design (AppUI)
    - Purpose: Encapsulate all UI creation and behavior.
    - Public attributes:
        enable_notifications (tk.BooleanVar): toggles desktop notifications for failed lookups
        show_logs (tk.BooleanVar): toggles visibility of the logs panel (lookup events)
        closed (bool): set once the window is closed; the pump loop exits on it
    - Public methods:
        refresh_ui(): reconcile row widgets with RowCollection (keyed by row id)
        on_lookup(): RowCollection hook; appends a Logs line and may notify
    """

    def __init__(
        self,
        root: tk.Tk,
        rows: RowCollection,
        scheduler: TickScheduler,
        spawn: Callable[[Awaitable[None]], None],
    ):
        self.root = root
        self.rows = rows
        self.scheduler = scheduler
        self.spawn = spawn
        self.closed = False

        self._widgets: Dict[int, RowWidgets] = {}
        self._packed_order: List[int] = []

        # UI state variables
        self.enable_notifications = tk.BooleanVar(value=True)
        self.show_logs = tk.BooleanVar(value=False)

        # Window
        self.root.title(WINDOW_TITLE)
        self._set_icon()
        self.root.rowconfigure(0, weight=1)
        self.root.columnconfigure(0, weight=1)
        self.root.configure(bg=BG)
        self.root.protocol("WM_DELETE_WINDOW", self.close)

        # Paned window: top = card (title, rows, buttons), bottom = logs (when shown)
        self.paned = ttk.PanedWindow(self.root, orient=tk.VERTICAL)
        self.paned.grid(row=0, column=0, sticky="nsew")

        content_frame = tk.Frame(self.paned, bg=BG)
        content_frame.columnconfigure(0, weight=1)
        content_frame.rowconfigure(2, weight=1)
        self.paned.add(content_frame, weight=1)

        self.bottom_frame = tk.Frame(self.paned, bg=BG)
        self.logs_box = tk.Text(self.bottom_frame, height=6, bg="#1b1b1b", fg="#dddddd", wrap="none")
        self.logs_box.configure(state="disabled")
        self.logs_box.pack(fill=tk.BOTH, expand=True, padx=10, pady=(0, 6))
        self.logs_box.pack_forget()  # hidden by default
        self.paned.add(self.bottom_frame, weight=0)

        def _keep_sash_collapsed(_event=None):
            """When Logs is unchecked, keep sash at bottom so window can resize down."""
            if not self.show_logs.get():
                self.paned.update_idletasks()
                total = self.paned.winfo_height()
                if total > 0:
                    self.paned.sashpos(0, total)

        self.paned.bind("<Configure>", _keep_sash_collapsed)

        style = ttk.Style(self.root)
        style.theme_use("default")

        # Card header
        tk.Label(content_frame, text=WINDOW_TITLE, fg="#ffffff", bg=BG,
                 font=("Segoe UI", 14, "bold")).grid(row=0, column=0, sticky="w", padx=10, pady=(10, 0))
        tk.Label(content_frame, text=CARD_DESCRIPTION, fg=MUTED, bg=BG).grid(
            row=1, column=0, sticky="w", padx=10, pady=(0, 8))

        self.rows_frame = tk.Frame(content_frame, bg=BG)
        self.rows_frame.grid(row=2, column=0, sticky="nsew", padx=10)
        self.empty_label = tk.Label(self.rows_frame, text=EMPTY_STATE_MESSAGE, fg=MUTED, bg=BG)

        # Buttons & toggles
        button_frame = tk.Frame(content_frame, bg=BG)
        button_frame.grid(row=3, column=0, sticky="ew", padx=10, pady=(8, 10))

        ttk.Button(button_frame, text="Add", command=self.add_row).pack(side=tk.LEFT, padx=5)

        tk.Checkbutton(
            button_frame,
            text="Enable Notifications",
            variable=self.enable_notifications,
            fg="white",
            bg=BG,
            selectcolor=FIELD_BG,
            activebackground=BG,
            activeforeground="white",
        ).pack(side=tk.LEFT, padx=5)

        tk.Checkbutton(
            button_frame,
            text="Show Logs",
            variable=self.show_logs,
            fg="white",
            bg=BG,
            selectcolor=FIELD_BG,
            command=self.toggle_logs,
        ).pack(side=tk.LEFT, padx=5)

        self.rows.on_change = self.refresh_ui
        self.rows.on_lookup = self.on_lookup

        # Initial paint
        self.refresh_ui()

    # ---------- RowCollection hooks ----------

    def on_lookup(self, row_id: int, ip: str, status: str, detail: str | None) -> None:
        """
        Purpose: Append a lookup event to the Logs panel; notify on failures when enabled.
        Inputs: row_id, looked-up ip, status (loading/success/error), detail (country or error text).
        """
        if self.closed:
            return
        self._append_log(format_lookup_log(self._index_of(row_id), ip, status, detail))
        if status == RowStatus.ERROR and self.enable_notifications.get():
            self._notify("IP lookup failed", f"{ip}: {detail}")

    # ---------- UI callbacks & utilities ----------

    def refresh_ui(self) -> None:
        """
        Purpose: Reconcile widgets with the current rows: create new, destroy removed,
                 re-render the rest in display order.
        """
        if self.closed:
            return
        rows = self.rows.rows
        live_ids = [row.id for row in rows]

        for row_id in list(self._widgets):
            if row_id not in live_ids:
                self._widgets.pop(row_id).destroy()

        for row in rows:
            if row.id not in self._widgets:
                self._widgets[row.id] = self._create_row_widgets(row.id)

        if live_ids != self._packed_order:
            for row_id in live_ids:
                self._widgets[row_id].frame.pack_forget()
            for row_id in live_ids:
                self._widgets[row_id].frame.pack(fill=tk.X, anchor="w")
            self._packed_order = live_ids

        for index, row in enumerate(rows, start=1):
            widgets = self._widgets[row.id]
            widgets.render(describe_row(row, index, widgets.focused), row.ip)

        if rows:
            self.empty_label.pack_forget()
        else:
            self.empty_label.pack(pady=20)

    def add_row(self) -> None:
        self.rows.add_row()
        self.refresh_ui()
        last = self.rows.rows[-1]
        self._widgets[last.id].entry.focus_set()

    def remove_row(self, row_id: int) -> None:
        self.rows.remove_row(row_id)

    def toggle_logs(self) -> None:
        """Show logs in bottom pane. Resize pane to show/hide."""
        self.paned.update_idletasks()
        total = self.paned.winfo_height()
        if self.show_logs.get():
            self.paned.pane(self.bottom_frame, weight=1)
            self.logs_box.pack(fill=tk.BOTH, expand=True, padx=10, pady=(0, 6))
            if total > 0:
                self.paned.sashpos(0, int(total * 0.7))
        else:
            self.logs_box.pack_forget()
            self.paned.pane(self.bottom_frame, weight=0)
            if total > 0:
                self.paned.sashpos(0, total)

    def close(self) -> None:
        for widgets in self._widgets.values():
            widgets.clock.dispose()
        self.closed = True
        self.root.destroy()

    # ---------- per-row wiring ----------

    def _create_row_widgets(self, row_id: int) -> RowWidgets:
        widgets = RowWidgets(self.rows_frame, row_id, self.scheduler)

        def on_write(*_args):
            if not widgets.syncing:
                self.rows.update_row_ip(row_id, widgets.ip_var.get())

        def on_focus_in(_event):
            widgets.focused = True
            self.refresh_ui()

        def on_focus_out(_event):
            widgets.focused = False
            self.refresh_ui()
            self._request_lookup(row_id, widgets.ip_var.get())

        def on_enter(_event):
            self._request_lookup(row_id, widgets.ip_var.get())

        widgets.ip_var.trace_add("write", on_write)
        widgets.entry.bind("<FocusIn>", on_focus_in)
        widgets.entry.bind("<FocusOut>", on_focus_out)
        widgets.entry.bind("<Return>", on_enter)
        widgets.remove_button.configure(command=lambda: self.remove_row(row_id))
        return widgets

    def _request_lookup(self, row_id: int, text: str) -> None:
        if self.closed or not should_lookup(text):
            return
        self.spawn(self.rows.lookup_row(row_id))

    # ---------- internal helpers ----------

    def _index_of(self, row_id: int) -> int:
        for index, row in enumerate(self.rows.rows, start=1):
            if row.id == row_id:
                return index
        return 0

    def _set_icon(self) -> None:
        path = get_icon_path(ICON_FILE)
        if not os.path.exists(path):
            return
        try:
            self.root.iconbitmap(path)
        except tk.TclError as exc:
            logger.debug("could not set window icon %s: %s", path, exc)

    def _notify(self, title: str, message: str) -> None:
        try:
            notification.notify(title=title, message=message, timeout=5)
        except NotImplementedError:
            logger.info("desktop notifications are not available on this platform")

    def _append_log(self, text: str) -> None:
        """
        Purpose: Append one line to the Logs panel and trim to LOG_MAX_LINES.
        """
        if self.closed:
            return
        self.logs_box.configure(state="normal")
        self.logs_box.insert("end", text)
        self.logs_box.see("end")
        total_lines = int(self.logs_box.index("end-1c").split(".")[0])
        if total_lines > LOG_MAX_LINES:
            remove = total_lines - LOG_MAX_LINES
            self.logs_box.delete("1.0", f"{remove + 1}.0")
        self.logs_box.configure(state="disabled")
