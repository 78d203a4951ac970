import dataclasses

import pytest

from config import ALL_AGES
from selection import (
    CLICKED, HOVERED, IDLE, ChangeAge, ChangeGender, Click, ClickBackground,
    Hover, SelectionState, chart_scopes, needs_widget_reset, transition,
)


@pytest.fixture
def clicked_usa(survey):
    return transition(SelectionState(), Click("USA", "United States", (-98.5, 39.8)), survey)


def test_default_state_is_idle():
    state = SelectionState()
    assert state.mode == IDLE
    assert state.age_filter == ALL_AGES
    assert state.gender_filter == "all"
    assert state.active_country is None
    assert state.active_region is None
    assert state.tooltip is None


def test_state_is_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        SelectionState().mode = CLICKED


# ── hover ─────────────────────────────────────────────────────────

def test_hover_known_country(survey):
    state = transition(SelectionState(), Hover("DEU", "Germany"), survey)
    assert state.mode == HOVERED
    assert state.active_country == "DEU"
    assert state.active_country_name == "Germany"
    assert state.active_region == "Protestant Europe"
    assert state.tooltip is None


def test_hover_moves_between_countries(survey):
    state = transition(SelectionState(), Hover("DEU", "Germany"), survey)
    state = transition(state, Hover("JPN", "Japan"), survey)
    assert state.active_country == "JPN"
    assert state.active_region == "Confucian"


def test_hover_unknown_country_goes_idle(survey):
    state = transition(SelectionState(), Hover("DEU", "Germany"), survey)
    state = transition(state, Hover("FRA", "France"), survey)
    assert state.mode == IDLE
    assert state.active_country is None


def test_hover_none_goes_idle(survey):
    state = transition(SelectionState(), Hover("DEU", "Germany"), survey)
    state = transition(state, Hover(None), survey)
    assert state == SelectionState()


def test_hover_respects_filters(survey):
    state = transition(SelectionState(), ChangeGender("male"), survey)
    state = transition(state, Hover("DEU", "Germany"), survey)
    assert state.mode == IDLE


def test_hover_is_ignored_while_pinned(survey, clicked_usa):
    assert transition(clicked_usa, Hover("DEU", "Germany"), survey) is clicked_usa
    assert transition(clicked_usa, Hover(None), survey) is clicked_usa


# ── click ─────────────────────────────────────────────────────────

def test_click_pins_country_with_tooltip(clicked_usa):
    assert clicked_usa.mode == CLICKED
    assert clicked_usa.active_country == "USA"
    assert clicked_usa.active_country_name == "United States"
    assert clicked_usa.active_region == "English-speaking"

    tooltip = clicked_usa.tooltip
    assert tooltip.country_code == "USA"
    assert tooltip.respondent_count == 2
    assert tooltip.group_level == "Low"
    assert tooltip.average_score == pytest.approx(1.75)
    assert tooltip.position == (-98.5, 39.8)


def test_click_same_country_toggles_back_to_idle(survey, clicked_usa):
    state = transition(clicked_usa, Click("USA", "United States"), survey)
    assert state == SelectionState()


def test_click_other_country_moves_pin(survey, clicked_usa):
    state = transition(clicked_usa, Click("DEU", "Germany"), survey)
    assert state.mode == CLICKED
    assert state.active_country == "DEU"
    assert state.tooltip.group_level == "Medium"
    assert state.tooltip.respondent_count == 1


def test_click_after_hover_pins(survey):
    state = transition(SelectionState(), Hover("JPN", "Japan"), survey)
    state = transition(state, Click("JPN", "Japan"), survey)
    assert state.mode == CLICKED


def test_click_unknown_country_goes_idle(survey, clicked_usa):
    assert transition(clicked_usa, Click("FRA", "France"), survey) == SelectionState()
    assert transition(SelectionState(), Click(None), survey) == SelectionState()


def test_click_country_filtered_out_goes_idle(survey):
    state = transition(SelectionState(), ChangeAge(0), survey)
    state = transition(state, Click("USA", "United States"), survey)
    assert state.mode == IDLE
    assert state.age_filter == 0


def test_click_tooltip_counts_only_filtered_respondents(survey):
    state = transition(SelectionState(), ChangeGender("female"), survey)
    state = transition(state, Click("USA", "United States"), survey)
    assert state.tooltip.respondent_count == 1
    assert state.tooltip.average_score == pytest.approx(2.0)


def test_click_without_name_falls_back_to_code(survey):
    state = transition(SelectionState(), Click("JPN"), survey)
    assert state.active_country_name == "JPN"
    assert state.tooltip.country_name == "JPN"


def test_click_background_clears_pin(survey, clicked_usa):
    state = transition(clicked_usa, ClickBackground(), survey)
    assert state == SelectionState()


# ── filters ───────────────────────────────────────────────────────

def test_change_gender_resets_selection(survey, clicked_usa):
    state = transition(clicked_usa, ChangeGender("female"), survey)
    assert state.mode == IDLE
    assert state.tooltip is None
    assert state.gender_filter == "female"
    assert list(state.filtered(survey)["country_code"]) == ["USA", "DEU"]


def test_change_age_resets_selection(survey, clicked_usa):
    state = transition(clicked_usa, ChangeAge(2), survey)
    assert state.mode == IDLE
    assert state.active_country is None
    assert state.age_filter == 2
    assert list(state.filtered(survey)["country_code"]) == ["DEU"]


def test_filters_survive_drill_down(survey):
    state = transition(SelectionState(), ChangeGender("male"), survey)
    state = transition(state, Click("JPN", "Japan"), survey)
    state = transition(state, ClickBackground(), survey)
    assert state.gender_filter == "male"


def test_unknown_event_raises(survey):
    with pytest.raises(TypeError):
        transition(SelectionState(), "click", survey)


# ── widget reset ──────────────────────────────────────────────────

@pytest.mark.parametrize("event", [
    ClickBackground(), ChangeAge(2), ChangeGender("female"), Click("USA", "United States"),
])
def test_widgets_reset_when_pin_is_dropped(survey, clicked_usa, event):
    state = transition(clicked_usa, event, survey)
    assert needs_widget_reset(event, state)


def test_widgets_keep_a_pinning_click(survey, clicked_usa):
    event = Click("DEU", "Germany")
    assert not needs_widget_reset(event, transition(clicked_usa, event, survey))


def test_widgets_keep_value_on_hover(survey):
    event = Hover(None)
    assert not needs_widget_reset(event, transition(SelectionState(), event, survey))


def test_reclick_after_clear_pins_again(survey, clicked_usa):
    state = transition(clicked_usa, ClickBackground(), survey)
    state = transition(state, Click("USA", "United States"), survey)
    assert state.mode == CLICKED
    assert state.active_country == "USA"


# ── chart scopes ──────────────────────────────────────────────────

def test_chart_scopes_idle_are_global(survey):
    scopes = chart_scopes(SelectionState(), survey)
    for scope in scopes:
        assert scope.title == "Global Responses"
        assert len(scope.respondents) == len(survey)


def test_chart_scopes_follow_active_country_and_region(survey, clicked_usa):
    scopes = chart_scopes(clicked_usa, clicked_usa.filtered(survey))

    assert scopes.country_pie.title == "United States Responses"
    assert set(scopes.country_pie.respondents["country_code"]) == {"USA"}

    assert scopes.region_pie.title == "English-speaking Responses"
    assert set(scopes.region_pie.respondents["country_code"]) == {"USA", "GBR"}


def test_bar_chart_is_region_scoped_but_titled_by_country(survey, clicked_usa):
    bar = chart_scopes(clicked_usa, clicked_usa.filtered(survey)).question_bar
    assert bar.title == "United States Responses For Each Question"
    assert set(bar.respondents["country_code"]) == {"USA", "GBR"}
