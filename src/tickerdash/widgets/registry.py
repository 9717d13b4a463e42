"""
Widget registry: the ticker widgets and the layout they occupy.

Layout and tickers are held as tuples and always replaced together in one
assignment. Each operation builds the complete next state first, so a step
that raises leaves the registry exactly as it was.
"""

import time
from typing import TYPE_CHECKING, Callable, Iterable, List, Optional, Tuple

from ..config.constants import LAYOUT_DEFAULTS
from ..config.logging_config import get_logger, log_widget_event
from ..exceptions import raise_symbol_validation_error
from . import layout as layout_store
from .layout import Layout, LayoutDiscrepancy, PLACEMENT_SENTINEL
from .models import MENU_WIDGET_ID, DashboardSnapshot, QuoteData, TickerWidget, normalize_symbol

if TYPE_CHECKING:
    from ..data.resolver import QuoteResolver

logger = get_logger(__name__)


class WidgetRegistry:
    """Owns the ticker widgets and their layout entries."""

    def __init__(
        self,
        resolver: "QuoteResolver",
        snapshot: Optional[DashboardSnapshot] = None,
        placement: str = PLACEMENT_SENTINEL,
        ticker_width: int = LAYOUT_DEFAULTS.TICKER_WIDTH,
        ticker_height: int = LAYOUT_DEFAULTS.TICKER_HEIGHT,
        clock: Callable[[], float] = time.time,
    ):
        self.resolver = resolver
        self.placement = placement
        self.ticker_width = ticker_width
        self.ticker_height = ticker_height
        self._clock = clock

        snapshot = snapshot or DashboardSnapshot()
        self._state: Tuple[Layout, Tuple[TickerWidget, ...]] = (
            layout_store.initial_layout(snapshot.layout),
            tuple(snapshot.tickers),
        )

    @property
    def layout(self) -> Layout:
        return self._state[0]

    @property
    def tickers(self) -> Tuple[TickerWidget, ...]:
        return self._state[1]

    def _commit(self, layout: Layout, tickers: Tuple[TickerWidget, ...]) -> None:
        self._state = (layout, tickers)

    def get(self, widget_id: str) -> Optional[TickerWidget]:
        """Ticker widget by id, or None."""
        for ticker in self.tickers:
            if ticker.id == widget_id:
                return ticker
        return None

    def _new_widget_id(self, symbol: str) -> str:
        """SYMBOL-<epoch ms>, with a -2, -3, ... suffix if that id is taken."""
        base = f"{symbol}-{int(self._clock() * 1000)}"
        taken = {entry.id for entry in self.layout} | {ticker.id for ticker in self.tickers}
        widget_id = base
        counter = 2
        while widget_id in taken:
            widget_id = f"{base}-{counter}"
            counter += 1
        return widget_id

    async def add_ticker(
        self,
        symbol: str,
        compare: bool = False,
        accept: Optional[Callable[[QuoteData], bool]] = None,
    ) -> Optional[TickerWidget]:
        """
        Resolve a symbol and add a ticker widget for it.

        The registry is not touched until the resolver returns, and the id
        is chosen against the state as it is after the await. When accept
        is given it is called with the resolved quote; returning False
        drops the quote and nothing is added.

        Returns:
            The new widget, or None if accept rejected the quote

        Raises:
            ValidationError: empty symbol
            ResolverUnavailable: provider failure, nothing is added
        """
        normalized = normalize_symbol(symbol)
        if not normalized:
            raise_symbol_validation_error(symbol, "symbol must not be empty")

        data = await self.resolver.resolve(normalized)
        if accept is not None and not accept(data):
            return None
        return self.insert_resolved(data, compare=compare)

    def insert_resolved(self, data: QuoteData, compare: bool = False) -> TickerWidget:
        """Add a widget for an already resolved quote."""
        widget = TickerWidget(id=self._new_widget_id(data.symbol), data=data, compare=compare)
        new_layout = layout_store.insert(
            self.layout,
            widget.id,
            width=self.ticker_width,
            height=self.ticker_height,
            placement=self.placement,
        )
        self._commit(new_layout, self.tickers + (widget,))
        log_widget_event(logger, "added", widget.id, symbol=data.symbol, compare=compare)
        return widget

    def remove_widget(self, widget_id: str) -> bool:
        """Remove a ticker and its layout entry. Returns False for unknown ids."""
        if widget_id == MENU_WIDGET_ID or self.get(widget_id) is None:
            logger.debug(f"Ignoring remove of unknown widget {widget_id}")
            return False

        self._commit(
            layout_store.remove(self.layout, widget_id),
            tuple(t for t in self.tickers if t.id != widget_id),
        )
        log_widget_event(logger, "removed", widget_id)
        return True

    def set_compare(self, widget_id: str, value: bool) -> Optional[TickerWidget]:
        """Set the compare flag. Returns the (possibly unchanged) widget, None if unknown."""
        current = self.get(widget_id)
        if current is None:
            return None
        if current.compare == bool(value):
            return current

        updated = TickerWidget(id=current.id, data=current.data, compare=bool(value))
        self._commit(
            self.layout,
            tuple(updated if t.id == widget_id else t for t in self.tickers),
        )
        log_widget_event(logger, "compare_changed", widget_id, compare=updated.compare)
        return updated

    def toggle_compare(self, widget_id: str) -> Optional[TickerWidget]:
        """Flip the compare flag. Returns the new widget, None if unknown."""
        current = self.get(widget_id)
        if current is None:
            return None
        return self.set_compare(widget_id, not current.compare)

    def compare_set(self) -> List[TickerWidget]:
        """Tickers marked for comparison, in insertion order."""
        return [ticker for ticker in self.tickers if ticker.compare]

    def replace_layout(self, new_layout: Iterable[object]) -> LayoutDiscrepancy:
        """
        Take over a layout computed by the grid renderer.

        Malformed input raises ValidationError before anything changes. Id
        mismatches are accepted and reported in the returned discrepancy.
        """
        parsed = layout_store.replace(self.layout, new_layout)
        self._commit(parsed, self.tickers)

        discrepancy = layout_store.check_consistency(parsed, self.tickers)
        if not discrepancy.is_consistent:
            logger.warning(
                "Renderer layout does not match tickers",
                extra={
                    "orphan_entries": sorted(discrepancy.orphan_entries),
                    "missing_entries": sorted(discrepancy.missing_entries),
                    "menu_present": discrepancy.menu_present,
                },
            )
        return discrepancy

    def consistency(self) -> LayoutDiscrepancy:
        return layout_store.check_consistency(self.layout, self.tickers)

    def snapshot(self) -> DashboardSnapshot:
        layout, tickers = self._state
        return DashboardSnapshot(layout=layout, tickers=tickers)
