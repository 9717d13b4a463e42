"""
Snapshot persistence for the dashboard.

The layout and the ticker widgets are stored as JSON text under two keys
of a KeyValueStore. Reading happens once at startup and never fails: an
absent, unreadable or malformed snapshot yields the defaults. A well-formed
snapshot whose layout and tickers disagree is loaded as it is and the
mismatch is logged. Writing happens after every change; a failed write is
reported and swallowed so the in-memory dashboard keeps working.
"""

import json
from typing import Any, Optional

from .backends import KeyValueStore
from ..config.constants import MENU_POSITIONS, STORAGE_KEYS
from ..config.logging_config import get_logger
from ..error_handling import create_error_context, handle_error
from ..exceptions import PersistenceUnavailable, ValidationError
from ..widgets.layout import check_consistency
from ..widgets.models import DashboardSnapshot, parse_layout, parse_tickers

logger = get_logger(__name__)


def encode_snapshot(snapshot: DashboardSnapshot) -> tuple[str, str]:
    """Serialize a snapshot to (layout_text, tickers_text)."""
    layout_text = json.dumps(snapshot.layout_dicts(), separators=(",", ":"))
    tickers_text = json.dumps(snapshot.ticker_dicts(), separators=(",", ":"))
    return layout_text, tickers_text


def decode_snapshot(layout_text: str, tickers_text: str) -> DashboardSnapshot:
    """
    Parse stored text back into a snapshot.

    Layout and tickers that disagree on ids are returned as they are;
    use check_consistency() to find the mismatch.

    Raises:
        ValidationError: text that is not JSON, nested too deeply to
            parse, or that does not hold valid layout and ticker lists
    """
    try:
        raw_layout = json.loads(layout_text)
        raw_tickers = json.loads(tickers_text)
    except (ValueError, TypeError, RecursionError) as e:
        raise ValidationError("snapshot", str(e)[:80], "not valid JSON") from e

    if not isinstance(raw_layout, list) or not isinstance(raw_tickers, list):
        raise ValidationError("snapshot", type(raw_layout).__name__, "layout and tickers must be lists")

    return DashboardSnapshot(layout=parse_layout(raw_layout), tickers=parse_tickers(raw_tickers))


class SnapshotStore:
    """Reads and writes the dashboard snapshot through a KeyValueStore."""

    def __init__(self, backend: KeyValueStore):
        self.backend = backend
        self.last_save_failed = False

    def load(self) -> DashboardSnapshot:
        """Load the stored snapshot, or the default one."""
        try:
            layout_text = self.backend.get(STORAGE_KEYS.LAYOUT)
            tickers_text = self.backend.get(STORAGE_KEYS.TICKERS)
        except PersistenceUnavailable as e:
            handle_error(e, context=create_error_context(function_name="snapshot_load"))
            return DashboardSnapshot()

        if layout_text is None and tickers_text is None:
            logger.info("No stored dashboard, starting with defaults")
            return DashboardSnapshot()
        if layout_text is None or tickers_text is None:
            logger.warning("Stored dashboard is incomplete, starting with defaults")
            return DashboardSnapshot()

        try:
            snapshot = decode_snapshot(layout_text, tickers_text)
        except ValidationError as e:
            logger.warning(f"Stored dashboard is malformed, starting with defaults: {e}")
            return DashboardSnapshot()

        discrepancy = check_consistency(snapshot.layout, snapshot.tickers)
        if not discrepancy.is_consistent:
            logger.warning(
                "Stored layout does not match stored tickers, loading as is",
                extra={
                    "orphan_entries": sorted(discrepancy.orphan_entries),
                    "missing_entries": sorted(discrepancy.missing_entries),
                    "menu_present": discrepancy.menu_present,
                },
            )

        logger.info(f"Loaded dashboard with {len(snapshot.tickers)} ticker widgets")
        return snapshot

    def save(self, snapshot: DashboardSnapshot) -> bool:
        """Write the snapshot. Returns False if storage was unavailable."""
        layout_text, tickers_text = encode_snapshot(snapshot)
        try:
            self.backend.set(STORAGE_KEYS.LAYOUT, layout_text)
            self.backend.set(STORAGE_KEYS.TICKERS, tickers_text)
        except PersistenceUnavailable as e:
            self.last_save_failed = True
            handle_error(e, context=create_error_context(function_name="snapshot_save"))
            return False

        self.last_save_failed = False
        logger.debug(f"Saved dashboard with {len(snapshot.tickers)} ticker widgets")
        return True

    def load_menu_position(self) -> Optional[str]:
        """Stored menu position, or None to follow the screen orientation."""
        try:
            text = self.backend.get(STORAGE_KEYS.MENU_POSITION)
        except PersistenceUnavailable as e:
            handle_error(e, context=create_error_context(function_name="menu_position_load"))
            return None
        if text is None:
            return None
        try:
            value: Any = json.loads(text)
        except json.JSONDecodeError:
            value = None
        if value not in MENU_POSITIONS:
            logger.warning(f"Ignoring stored menu position {text!r}")
            return None
        return value

    def save_menu_position(self, position: Optional[str]) -> bool:
        """Write the menu position; None clears it."""
        try:
            if position is None:
                self.backend.delete(STORAGE_KEYS.MENU_POSITION)
            else:
                self.backend.set(STORAGE_KEYS.MENU_POSITION, json.dumps(position))
        except PersistenceUnavailable as e:
            handle_error(e, context=create_error_context(function_name="menu_position_save"))
            return False
        return True
