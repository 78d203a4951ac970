"""
Selection Module for GenderLens
Cross-filter and drill-down state for the map, tooltip and charts
"""

from dataclasses import dataclass, replace
from typing import NamedTuple, Optional

import pandas as pd

from config import ALL_AGES, TIER_LABELS
from data_processor import (
    classify_countries, filter_respondents, first_region,
    respondents_in_country, respondents_in_region,
)

IDLE = "idle"
HOVERED = "hovered"
CLICKED = "clicked"


class TooltipPayload(NamedTuple):
    country_code: str
    country_name: str
    respondent_count: int
    group_level: str
    average_score: float
    position: Optional[tuple]


@dataclass(frozen=True)
class SelectionState:
    age_filter: int = ALL_AGES
    gender_filter: str = "all"
    mode: str = IDLE
    active_country: Optional[str] = None
    active_country_name: Optional[str] = None
    active_region: Optional[str] = None
    tooltip: Optional[TooltipPayload] = None

    @property
    def is_pinned(self) -> bool:
        return self.mode == CLICKED

    def filtered(self, respondents: pd.DataFrame) -> pd.DataFrame:
        """Respondents passing this state's age and gender filters."""
        return filter_respondents(respondents, self.age_filter, self.gender_filter)


# ──────────────────────────────────────────────────────────────────
# EVENTS
# ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Hover:
    country_code: Optional[str]
    country_name: Optional[str] = None


@dataclass(frozen=True)
class Click:
    country_code: Optional[str]
    country_name: Optional[str] = None
    position: Optional[tuple] = None


@dataclass(frozen=True)
class ClickBackground:
    pass


@dataclass(frozen=True)
class ChangeAge:
    bracket: int


@dataclass(frozen=True)
class ChangeGender:
    gender: str


def _idle(state: SelectionState) -> SelectionState:
    """Clear any drill-down while keeping the filters."""
    return SelectionState(age_filter=state.age_filter,
                          gender_filter=state.gender_filter)


def _activate(state, filtered, code, name, mode, tooltip=None):
    return replace(
        state,
        mode=mode,
        active_country=code,
        active_country_name=name if name is not None else code,
        active_region=first_region(filtered, code),
        tooltip=tooltip,
    )


def _on_hover(state, event, respondents):
    if state.is_pinned:
        return state
    filtered = state.filtered(respondents)
    code = event.country_code
    if not code or respondents_in_country(filtered, code).empty:
        return _idle(state)
    return _activate(state, filtered, code, event.country_name, HOVERED)


def _on_click(state, event, respondents):
    filtered = state.filtered(respondents)
    code = event.country_code
    summary = classify_countries(filtered).countries.get(code)
    if summary is None:
        return _idle(state)
    if state.is_pinned and state.active_country == code:
        return _idle(state)

    name = event.country_name if event.country_name is not None else code
    tooltip = TooltipPayload(
        country_code=code,
        country_name=name,
        respondent_count=len(respondents_in_country(filtered, code)),
        group_level=TIER_LABELS[summary.score_tier],
        average_score=summary.average_score,
        position=event.position,
    )
    return _activate(state, filtered, code, name, CLICKED, tooltip)


def transition(state: SelectionState, event, respondents: pd.DataFrame) -> SelectionState:
    """
    Apply one user event and return the next state.

    A click pins the selection: hover events are ignored until the same
    country is clicked again, the background is clicked, or a filter
    changes. Filter changes always drop the drill-down before the new
    filter value takes effect.

    Args:
        state: Current selection
        event: Hover, Click, ClickBackground, ChangeAge or ChangeGender
        respondents: The full, unfiltered respondent table

    Returns:
        New SelectionState (the input is never modified)
    """
    if isinstance(event, Hover):
        return _on_hover(state, event, respondents)
    if isinstance(event, Click):
        return _on_click(state, event, respondents)
    if isinstance(event, ClickBackground):
        return _idle(state)
    if isinstance(event, ChangeAge):
        return replace(_idle(state), age_filter=event.bracket)
    if isinstance(event, ChangeGender):
        return replace(_idle(state), gender_filter=event.gender)
    raise TypeError(f"Unknown selection event: {event!r}")


def needs_widget_reset(event, state: SelectionState) -> bool:
    """
    True when the map selection and the preview select must be cleared.

    Widgets keep their own value across reruns; once the state drops its
    pin they would still show the old country.
    """
    return not isinstance(event, Hover) and state.mode != CLICKED


# ──────────────────────────────────────────────────────────────────
# CHART SCOPES
# ──────────────────────────────────────────────────────────────────

class ChartScope(NamedTuple):
    title: str
    respondents: pd.DataFrame


class ChartScopes(NamedTuple):
    country_pie: ChartScope
    region_pie: ChartScope
    question_bar: ChartScope


def chart_scopes(state: SelectionState, filtered: pd.DataFrame) -> ChartScopes:
    """
    Pick the respondent subset and title for each chart.

    The bar chart follows the active region, not the active country, but
    its title names the country.
    """
    if state.active_country:
        country_pie = ChartScope(
            f"{state.active_country_name} Responses",
            respondents_in_country(filtered, state.active_country),
        )
    else:
        country_pie = ChartScope("Global Responses", filtered)

    if state.active_region:
        region_subset = respondents_in_region(filtered, state.active_region)
        region_pie = ChartScope(f"{state.active_region} Responses", region_subset)
    else:
        region_subset = filtered
        region_pie = ChartScope("Global Responses", filtered)

    if state.active_country_name:
        bar_title = f"{state.active_country_name} Responses For Each Question"
    else:
        bar_title = "Global Responses"

    return ChartScopes(country_pie, region_pie, ChartScope(bar_title, region_subset))
