"""Ephemeral UI state for the three screens, as a pure reducer.

Nothing here touches the orchestrator: screen changes and menu toggles can
never alter the article or the conversation.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal

Screen = Literal["landing", "generator", "editor"]
Tab = Literal["edit", "preview"]

TABS = ("edit", "preview")


@dataclass(frozen=True, slots=True)
class ViewState:
    screen: Screen = "landing"
    active_tab: Tab = "edit"
    show_ai_sidebar: bool = True
    show_export_menu: bool = False
    show_lang_menu: bool = False


def _close_menus(state: ViewState) -> ViewState:
    return replace(state, show_export_menu=False, show_lang_menu=False)


def reduce(state: ViewState, event: str) -> ViewState:
    """Return the state that follows ``event``.

    Events: start, back_to_landing, draft_ready, back_to_generator,
    toggle_tab, set_tab:<edit|preview>, toggle_sidebar, toggle_export_menu,
    toggle_lang_menu, language_chosen, export_chosen.
    """
    if event == "start":
        return replace(state, screen="generator")
    if event == "back_to_landing":
        return replace(state, screen="landing")
    if event == "draft_ready":
        return _close_menus(replace(state, screen="editor", active_tab="edit"))
    if event == "back_to_generator":
        return _close_menus(replace(state, screen="generator"))
    if event == "toggle_tab":
        return replace(state, active_tab="preview" if state.active_tab == "edit" else "edit")
    if event.startswith("set_tab:"):
        tab = event.split(":", 1)[1]
        if tab not in TABS:
            raise ValueError(f"Unknown tab '{tab}'")
        return replace(state, active_tab=tab)
    if event == "toggle_sidebar":
        return replace(state, show_ai_sidebar=not state.show_ai_sidebar)
    # Opening one menu closes the other
    if event == "toggle_export_menu":
        return replace(state, show_export_menu=not state.show_export_menu, show_lang_menu=False)
    if event == "toggle_lang_menu":
        return replace(state, show_lang_menu=not state.show_lang_menu, show_export_menu=False)
    if event in ("language_chosen", "export_chosen"):
        return _close_menus(state)
    raise ValueError(f"Unknown view event '{event}'")
