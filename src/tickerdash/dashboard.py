"""
Dashboard orchestrator.

Composes the widget registry, the quote resolver, the presentation mode
controller and the snapshot store behind the operations a UI calls:

1. Adds resolve the quote first and commit only after the await returns
2. Every change to layout or tickers is saved immediately
3. Overlay changes are never saved
4. After close(), late results are dropped and mutations are ignored
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from .config.constants import MENU_POSITIONS
from .config.logging_config import get_logger, log_error_with_context
from .config.schema import DashboardSettings
from .data.providers import QuoteProvider, create_provider
from .data.resolver import QuoteResolver
from .error_handling import create_error_context, handle_error
from .exceptions import ResolverUnavailable, ValidationError
from .storage import KeyValueStore, SnapshotStore, create_store
from .widgets.layout import Layout, LayoutDiscrepancy
from .widgets.models import QuoteData, TickerWidget, normalize_symbol
from .widgets.presentation import ModeKind, PresentationController, PresentationMode
from .widgets.registry import WidgetRegistry

logger = get_logger(__name__)


@dataclass(frozen=True)
class DashboardEvent:
    """Notification sent to subscribers after a change was applied."""

    name: str
    widget_id: Optional[str] = None


Listener = Callable[[DashboardEvent], None]


def default_menu_position(width: float, height: float) -> str:
    """Menu on the left in landscape, on top in portrait."""
    return "left" if width > height else "top"


class DashboardOrchestrator:
    """Single entry point for every dashboard state change."""

    def __init__(
        self,
        resolver: QuoteResolver,
        snapshots: SnapshotStore,
        settings: Optional[DashboardSettings] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings or DashboardSettings()
        self.resolver = resolver
        self.snapshots = snapshots

        self.registry = WidgetRegistry(
            resolver,
            snapshot=snapshots.load(),
            placement=self.settings.layout.placement,
            ticker_width=self.settings.layout.ticker_width,
            ticker_height=self.settings.layout.ticker_height,
            clock=clock,
        )
        self.presentation = PresentationController()
        self._menu_position = snapshots.load_menu_position()
        self._listeners: List[Listener] = []
        self._closed = False

    # ------------------------------------------------------------------
    # Read side

    @property
    def layout(self) -> Layout:
        return self.registry.layout

    @property
    def tickers(self):
        return self.registry.tickers

    @property
    def mode(self) -> PresentationMode:
        return self.presentation.mode

    @property
    def closed(self) -> bool:
        return self._closed

    def compare_set(self) -> List[TickerWidget]:
        return self.registry.compare_set()

    def fullscreen_view(self) -> Union[QuoteData, List[TickerWidget], None]:
        """
        What a fullscreen overlay shows right now.

        The ticker view shows the record it was opened with. The compare
        view shows the live compare set, so later changes appear in it.
        """
        mode = self.presentation.mode
        if mode.kind is ModeKind.FULLSCREEN_TICKER:
            return mode.ticker
        if mode.kind is ModeKind.FULLSCREEN_COMPARE:
            return self.compare_set()
        return None

    def grid_config(self) -> Dict[str, int]:
        """Grid geometry for the renderer."""
        return {
            "columns": self.settings.layout.columns,
            "row_height": self.settings.layout.row_height,
        }

    # ------------------------------------------------------------------
    # Subscribers

    def subscribe(self, callback: Listener) -> None:
        if callback not in self._listeners:
            self._listeners.append(callback)

    def unsubscribe(self, callback: Listener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _emit(self, name: str, widget_id: Optional[str] = None) -> None:
        event = DashboardEvent(name=name, widget_id=widget_id)
        for callback in list(self._listeners):
            try:
                callback(event)
            except Exception as e:
                log_error_with_context(logger, e, {"event": name, "widget_id": widget_id})

    # ------------------------------------------------------------------
    # Lifecycle

    def close(self) -> None:
        """Tear down. Adds still in flight will be discarded when they finish."""
        if self._closed:
            return
        self._closed = True
        self._listeners.clear()
        logger.info("Dashboard closed")

    def _ignored_after_close(self, operation: str) -> bool:
        if self._closed:
            logger.warning(f"Ignoring {operation}: dashboard is closed")
        return self._closed

    def _persist(self) -> None:
        self.snapshots.save(self.registry.snapshot())

    # ------------------------------------------------------------------
    # Widget lifecycle

    async def add_ticker(self, symbol: str) -> Optional[TickerWidget]:
        """
        Resolve a symbol and add its ticker widget.

        Returns:
            The new widget, or None if the dashboard was closed meanwhile

        Raises:
            ValidationError: empty symbol
            ResolverUnavailable: the provider failed; nothing was added
        """
        return await self._add(symbol, compare=False)

    async def add_compare_ticker(
        self, symbol: str, open_compare: Optional[bool] = None
    ) -> Optional[TickerWidget]:
        """
        Add a ticker widget already marked for comparison.

        open_compare=None follows settings.compare.auto_open.
        """
        widget = await self._add(symbol, compare=True)
        if widget is None:
            return None

        if open_compare is None:
            open_compare = self.settings.compare.auto_open
        if open_compare:
            self.open_fullscreen_compare()
        return widget

    async def _add(self, symbol: str, compare: bool) -> Optional[TickerWidget]:
        if self._ignored_after_close("add_ticker"):
            return None

        try:
            widget = await self.registry.add_ticker(symbol, compare=compare, accept=self._accepts_result)
        except ResolverUnavailable as e:
            handle_error(e, context=create_error_context(symbol=normalize_symbol(symbol), function_name="add_ticker"))
            raise

        if widget is None:
            return None
        self._persist()
        self._emit("widget_added", widget.id)
        return widget

    def _accepts_result(self, data: QuoteData) -> bool:
        if self._closed:
            logger.info(f"Discarding quote for {data.symbol}: dashboard closed while resolving")
            return False
        return True

    def remove_widget(self, widget_id: str) -> bool:
        if self._ignored_after_close("remove_widget"):
            return False
        if not self.registry.remove_widget(widget_id):
            return False
        self._persist()
        self._emit("widget_removed", widget_id)
        return True

    def toggle_compare(self, widget_id: str) -> Optional[TickerWidget]:
        if self._ignored_after_close("toggle_compare"):
            return None
        widget = self.registry.toggle_compare(widget_id)
        if widget is not None:
            self._persist()
            self._emit("compare_changed", widget_id)
        return widget

    def set_compare(self, widget_id: str, value: bool) -> Optional[TickerWidget]:
        if self._ignored_after_close("set_compare"):
            return None
        before = self.registry.get(widget_id)
        widget = self.registry.set_compare(widget_id, value)
        if widget is not None and widget is not before:
            self._persist()
            self._emit("compare_changed", widget_id)
        return widget

    def on_layout_changed(self, new_layout: Iterable[Any]) -> LayoutDiscrepancy:
        """
        Accept the layout reported by the grid renderer after drag or resize.

        Raises:
            ValidationError: malformed entries; the layout is left unchanged
        """
        if self._ignored_after_close("on_layout_changed"):
            return self.registry.consistency()

        previous = self.registry.layout
        discrepancy = self.registry.replace_layout(new_layout)
        if self.registry.layout != previous:
            self._persist()
            self._emit("layout_changed")
        return discrepancy

    # ------------------------------------------------------------------
    # Overlays

    def _apply_mode(self, operation: str, transition: Callable[[], bool]) -> bool:
        if self._ignored_after_close(operation):
            return False
        changed = transition()
        if changed:
            self._emit("mode_changed")
        return changed

    def open_fullscreen_ticker(self, widget_id: str) -> bool:
        """Show one widget's quote fullscreen. Unknown ids do nothing."""
        widget = self.registry.get(widget_id)
        if widget is None:
            return False
        return self._apply_mode(
            "open_fullscreen_ticker", lambda: self.presentation.open_fullscreen_ticker(widget.data)
        )

    def open_fullscreen_compare(self) -> bool:
        return self._apply_mode("open_fullscreen_compare", self.presentation.open_fullscreen_compare)

    def close_fullscreen(self) -> bool:
        return self._apply_mode("close_fullscreen", self.presentation.close_fullscreen)

    def open_menu(self) -> bool:
        return self._apply_mode("open_menu", self.presentation.open_menu)

    def close_menu(self) -> bool:
        return self._apply_mode("close_menu", self.presentation.close_menu)

    def toggle_menu(self) -> bool:
        return self._apply_mode("toggle_menu", self.presentation.toggle_menu)

    def open_drawer(self) -> bool:
        return self._apply_mode("open_drawer", self.presentation.open_drawer)

    def close_drawer(self) -> bool:
        return self._apply_mode("close_drawer", self.presentation.close_drawer)

    def backdrop_click(self) -> bool:
        return self._apply_mode("backdrop_click", self.presentation.backdrop_click)

    # ------------------------------------------------------------------
    # Menu position

    @property
    def menu_position(self) -> Optional[str]:
        """Stored menu position, None when it follows the screen orientation."""
        return self._menu_position

    def effective_menu_position(self, width: float, height: float) -> str:
        return self._menu_position or default_menu_position(width, height)

    def set_menu_position(self, position: str) -> bool:
        if position not in MENU_POSITIONS:
            raise ValidationError("menu_position", str(position), f"expected one of {', '.join(MENU_POSITIONS)}")
        if self._ignored_after_close("set_menu_position"):
            return False
        if position == self._menu_position:
            return False

        self._menu_position = position
        self.snapshots.save_menu_position(position)
        self._emit("menu_position_changed")
        return True

    def reset_menu_position(self, width: float, height: float) -> str:
        """Forget the stored position and return the orientation default."""
        if not self._ignored_after_close("reset_menu_position") and self._menu_position is not None:
            self._menu_position = None
            self.snapshots.save_menu_position(None)
            self._emit("menu_position_changed")
        return default_menu_position(width, height)


def build_dashboard(
    settings: Optional[DashboardSettings] = None,
    store: Optional[KeyValueStore] = None,
    provider: Optional[QuoteProvider] = None,
    clock: Callable[[], float] = time.time,
) -> DashboardOrchestrator:
    """Wire up an orchestrator from settings, with optional overrides for tests."""
    settings = settings or DashboardSettings()
    if store is None:
        store = create_store(settings.storage.backend, settings.storage.directory)
    if provider is None:
        provider = create_provider(settings.provider.name)

    return DashboardOrchestrator(
        QuoteResolver(provider),
        SnapshotStore(store),
        settings=settings,
        clock=clock,
    )
