"""
Widget state: value types, the layout store, the registry and the
presentation mode controller.
"""

from .models import (
    AUTO_BOTTOM,
    MENU_WIDGET_ID,
    NOT_AVAILABLE,
    UNKNOWN,
    DashboardSnapshot,
    LayoutEntry,
    QuoteData,
    TickerWidget,
)
from .layout import LayoutDiscrepancy, check_consistency
from .presentation import ModeKind, PresentationController, PresentationMode
from .registry import WidgetRegistry

__all__ = [
    'AUTO_BOTTOM', 'MENU_WIDGET_ID', 'NOT_AVAILABLE', 'UNKNOWN',
    'DashboardSnapshot', 'LayoutEntry', 'QuoteData', 'TickerWidget',
    'LayoutDiscrepancy', 'check_consistency',
    'ModeKind', 'PresentationController', 'PresentationMode',
    'WidgetRegistry',
]
