"""
tickerdash: state engine for a personal quote dashboard.

Holds the widget layout, the ticker widgets with their compare flags and
the overlay mode, and persists layout plus tickers after every change.
"""

__version__ = "0.1.0"
