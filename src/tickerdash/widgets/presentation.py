"""
Presentation mode: which overlay, if any, covers the dashboard.

The menu, the drawer and the two fullscreen views share a single slot.
Opening any of them replaces whatever is open; closing one that is not
open does nothing. The mode lives in memory only.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..config.logging_config import get_logger
from .models import QuoteData

logger = get_logger(__name__)


class ModeKind(Enum):
    CLOSED = "closed"
    MENU_OPEN = "menu_open"
    DRAWER_OPEN = "drawer_open"
    FULLSCREEN_TICKER = "fullscreen_ticker"
    FULLSCREEN_COMPARE = "fullscreen_compare"


FULLSCREEN_KINDS = frozenset({ModeKind.FULLSCREEN_TICKER, ModeKind.FULLSCREEN_COMPARE})


@dataclass(frozen=True)
class PresentationMode:
    """Current mode plus the quote shown by a fullscreen ticker view."""

    kind: ModeKind = ModeKind.CLOSED
    ticker: Optional[QuoteData] = None

    @property
    def is_fullscreen(self) -> bool:
        return self.kind in FULLSCREEN_KINDS


CLOSED = PresentationMode()


class PresentationController:
    """Single-slot state machine for menu, drawer and fullscreen views."""

    def __init__(self):
        self._mode = CLOSED

    @property
    def mode(self) -> PresentationMode:
        return self._mode

    @property
    def is_open(self) -> bool:
        return self._mode.kind is not ModeKind.CLOSED

    def _transition(self, target: PresentationMode, action: str) -> bool:
        if target == self._mode:
            return False
        logger.debug(f"{action}: {self._mode.kind.value} -> {target.kind.value}")
        self._mode = target
        return True

    def _close_if(self, kinds, action: str) -> bool:
        if self._mode.kind not in kinds:
            return False
        return self._transition(CLOSED, action)

    # Menu
    def open_menu(self) -> bool:
        return self._transition(PresentationMode(ModeKind.MENU_OPEN), "open_menu")

    def close_menu(self) -> bool:
        return self._close_if({ModeKind.MENU_OPEN}, "close_menu")

    def toggle_menu(self) -> bool:
        if self._mode.kind is ModeKind.MENU_OPEN:
            return self.close_menu()
        return self.open_menu()

    # Drawer
    def open_drawer(self) -> bool:
        return self._transition(PresentationMode(ModeKind.DRAWER_OPEN), "open_drawer")

    def close_drawer(self) -> bool:
        return self._close_if({ModeKind.DRAWER_OPEN}, "close_drawer")

    def backdrop_click(self) -> bool:
        return self._close_if({ModeKind.DRAWER_OPEN}, "backdrop_click")

    # Fullscreen
    def open_fullscreen_ticker(self, data: QuoteData) -> bool:
        """Show one quote fullscreen. The view keeps this exact record."""
        return self._transition(
            PresentationMode(ModeKind.FULLSCREEN_TICKER, ticker=data), "open_fullscreen_ticker"
        )

    def open_fullscreen_compare(self) -> bool:
        """Show the compare set fullscreen. Contents are read when rendered."""
        return self._transition(PresentationMode(ModeKind.FULLSCREEN_COMPARE), "open_fullscreen_compare")

    def close_fullscreen(self) -> bool:
        return self._close_if(FULLSCREEN_KINDS, "close_fullscreen")
