"""
Layout store: pure functions over the ordered list of widget placements.

Nothing here mutates its input. Every function returns a new tuple, so the
registry can build the next layout, check it, and only then commit it.
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional, Sequence, Tuple

from ..config.constants import LAYOUT_DEFAULTS
from ..exceptions import ValidationError
from .models import (
    AUTO_BOTTOM,
    MENU_WIDGET_ID,
    LayoutEntry,
    TickerWidget,
    menu_entry,
    parse_layout,
)

Layout = Tuple[LayoutEntry, ...]

PLACEMENT_SENTINEL = "sentinel"
PLACEMENT_EXPLICIT = "explicit"


def initial_layout(snapshot_layout: Optional[Iterable[LayoutEntry]] = None) -> Layout:
    """Return the persisted layout, or the default single-menu layout."""
    if snapshot_layout is None:
        return (menu_entry(),)
    return tuple(snapshot_layout)


def bottom_row(layout: Sequence[LayoutEntry]) -> int:
    """First row below every entry whose row is already known."""
    rows = [entry.y + entry.h for entry in layout if not entry.auto_placed]
    return max(rows, default=0)


def insert(
    layout: Sequence[LayoutEntry],
    widget_id: str,
    width: int = LAYOUT_DEFAULTS.TICKER_WIDTH,
    height: int = LAYOUT_DEFAULTS.TICKER_HEIGHT,
    placement: str = PLACEMENT_SENTINEL,
) -> Layout:
    """
    Append an entry for widget_id below everything else.

    With the sentinel placement the row is left to the renderer
    (AUTO_BOTTOM). With the explicit placement the row is computed here.
    """
    if any(entry.id == widget_id for entry in layout):
        raise ValidationError("layout", widget_id, "widget id already placed")

    if placement == PLACEMENT_EXPLICIT:
        row = bottom_row(layout)
    elif placement == PLACEMENT_SENTINEL:
        row = AUTO_BOTTOM
    else:
        raise ValidationError("placement", placement, "expected 'sentinel' or 'explicit'")

    entry = LayoutEntry(id=widget_id, x=LAYOUT_DEFAULTS.TICKER_X, y=row, w=width, h=height)
    return tuple(layout) + (entry,)


def remove(layout: Sequence[LayoutEntry], widget_id: str) -> Layout:
    """Drop the entry for widget_id. Unknown ids leave the layout as is."""
    return tuple(entry for entry in layout if entry.id != widget_id)


def replace(layout: Sequence[LayoutEntry], new_layout: Iterable[object]) -> Layout:
    """
    Accept a full layout computed by the renderer after a drag or resize.

    The renderer is trusted to keep ids stable; mismatches are reported by
    check_consistency, not repaired. Malformed entries raise ValidationError.
    """
    return parse_layout(new_layout)


@dataclass(frozen=True)
class LayoutDiscrepancy:
    """Result of cross-checking layout ids against the ticker registry."""

    orphan_entries: FrozenSet[str] = frozenset()
    missing_entries: FrozenSet[str] = frozenset()
    menu_present: bool = True

    @property
    def is_consistent(self) -> bool:
        return self.menu_present and not self.orphan_entries and not self.missing_entries


def check_consistency(
    layout: Sequence[LayoutEntry], tickers: Sequence[TickerWidget]
) -> LayoutDiscrepancy:
    """Compare layout ids (menu excluded) with ticker ids."""
    layout_ids = {entry.id for entry in layout}
    ticker_ids = {ticker.id for ticker in tickers}
    return LayoutDiscrepancy(
        orphan_entries=frozenset(layout_ids - ticker_ids - {MENU_WIDGET_ID}),
        missing_entries=frozenset(ticker_ids - layout_ids),
        menu_present=MENU_WIDGET_ID in layout_ids,
    )
