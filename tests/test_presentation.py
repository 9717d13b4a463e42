import pytest

from tickerdash.widgets.models import QuoteData
from tickerdash.widgets.presentation import ModeKind, PresentationController

QUOTE = QuoteData(name="Apple Inc.", symbol="AAPL", price=193.6)


@pytest.fixture
def controller():
    return PresentationController()


class TestPresentationController:
    """Test the single-slot overlay state machine."""

    def test_starts_closed(self, controller):
        assert controller.mode.kind is ModeKind.CLOSED
        assert controller.mode.ticker is None
        assert not controller.is_open

    def test_menu_toggle(self, controller):
        assert controller.toggle_menu() is True
        assert controller.mode.kind is ModeKind.MENU_OPEN
        assert controller.toggle_menu() is True
        assert controller.mode.kind is ModeKind.CLOSED

    def test_close_in_wrong_state_is_noop(self, controller):
        controller.open_drawer()
        assert controller.close_menu() is False
        assert controller.close_fullscreen() is False
        assert controller.mode.kind is ModeKind.DRAWER_OPEN

    def test_backdrop_click_closes_drawer_only(self, controller):
        assert controller.backdrop_click() is False
        controller.open_drawer()
        assert controller.backdrop_click() is True
        assert controller.mode.kind is ModeKind.CLOSED

    def test_opening_replaces_current_mode(self, controller):
        controller.open_fullscreen_ticker(QUOTE)
        controller.open_menu()
        assert controller.mode.kind is ModeKind.MENU_OPEN
        assert controller.mode.ticker is None

        controller.open_fullscreen_compare()
        assert controller.mode.kind is ModeKind.FULLSCREEN_COMPARE
        assert controller.mode.is_fullscreen

    def test_fullscreen_ticker_keeps_payload(self, controller):
        controller.open_fullscreen_ticker(QUOTE)
        assert controller.mode.kind is ModeKind.FULLSCREEN_TICKER
        assert controller.mode.ticker is QUOTE

    def test_close_fullscreen_from_either_view(self, controller):
        controller.open_fullscreen_ticker(QUOTE)
        assert controller.close_fullscreen() is True
        controller.open_fullscreen_compare()
        assert controller.close_fullscreen() is True
        assert controller.mode.kind is ModeKind.CLOSED

    def test_reopening_same_mode_reports_no_change(self, controller):
        assert controller.open_drawer() is True
        assert controller.open_drawer() is False
