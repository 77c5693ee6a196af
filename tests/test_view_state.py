"""Tests for the session view-state reducer."""

from __future__ import annotations

import pytest

from newsbloggen.view_state import ViewState, reduce


@pytest.mark.unit
class TestReduce:
    def test_screen_flow(self) -> None:
        state = ViewState()
        assert state.screen == "landing"
        state = reduce(state, "start")
        assert state.screen == "generator"
        state = reduce(state, "draft_ready")
        assert state.screen == "editor"
        state = reduce(state, "back_to_generator")
        assert state.screen == "generator"
        assert reduce(state, "back_to_landing").screen == "landing"

    def test_tab_toggle_and_set(self) -> None:
        state = reduce(ViewState(), "toggle_tab")
        assert state.active_tab == "preview"
        assert reduce(state, "toggle_tab").active_tab == "edit"
        assert reduce(state, "set_tab:edit").active_tab == "edit"
        with pytest.raises(ValueError):
            reduce(state, "set_tab:split")

    def test_menus_are_exclusive_and_close_on_choice(self) -> None:
        state = reduce(ViewState(), "toggle_export_menu")
        assert state.show_export_menu and not state.show_lang_menu
        state = reduce(state, "toggle_lang_menu")
        assert state.show_lang_menu and not state.show_export_menu
        state = reduce(state, "language_chosen")
        assert not state.show_lang_menu and not state.show_export_menu

    def test_last_toggle_wins(self) -> None:
        state = ViewState()
        for _ in range(3):
            state = reduce(state, "toggle_sidebar")
        assert state.show_ai_sidebar is False

    def test_input_state_is_not_mutated(self) -> None:
        original = ViewState()
        reduce(original, "toggle_sidebar")
        assert original.show_ai_sidebar is True

    def test_unknown_event(self) -> None:
        with pytest.raises(ValueError):
            reduce(ViewState(), "fly")
