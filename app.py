"""
GenderLens: Global Perspectives on Gender Equality
Interactive dashboard over the World Values Survey

Research Question:
    How do attitudes towards women's roles in family, politics, education
    and business differ across countries, cultural regions, ages and genders?
"""

import requests
import streamlit as st

from config import AGE_BRACKETS, ALL_AGES, GENDER_OPTIONS, QUESTIONS
from data_loader import boundary_info, get_data_summary, load_boundaries, load_respondents
from data_processor import (
    classify_countries, compute_question_summaries, compute_response_split,
)
from selection import (
    ChangeAge, ChangeGender, ClickBackground, Hover, SelectionState,
    chart_scopes, needs_widget_reset, transition,
)
from utils import (
    age_label, describe_filters, format_number, format_percentage, format_tooltip,
)
from visualizations import (
    create_color_legend, create_question_bar, create_response_pie,
    create_world_map, map_event,
)

# ──────────────────────────────────────────────────────────────────
# PAGE CONFIG  (must be first Streamlit call)
# ──────────────────────────────────────────────────────────────────
st.set_page_config(
    page_title="GenderLens – Global Perspectives on Gender Equality",
    page_icon="🌍",
    layout="wide",
    initial_sidebar_state="expanded",
)

# ──────────────────────────────────────────────────────────────────
# CSS
# ──────────────────────────────────────────────────────────────────
st.markdown("""
<style>
    .banner-title {
        font-size: 2.6rem;
        font-weight: 900;
        color: #6e2c00;
        margin-bottom: 0.1rem;
    }
    .banner-sub {
        font-size: 1.1rem;
        color: #6c757d;
        margin-bottom: 1.5rem;
    }
    div[data-testid="metric-container"] {
        background: #f8f9fa;
        border-radius: 10px;
        border-left: 5px solid #6e2c00;
        padding: 0.8rem 1rem;
    }
</style>
""", unsafe_allow_html=True)


# ──────────────────────────────────────────────────────────────────
# SELECTION STATE  (one immutable value per session)
# ──────────────────────────────────────────────────────────────────

def current_state() -> SelectionState:
    if "selection" not in st.session_state:
        st.session_state["selection"] = SelectionState()
    return st.session_state["selection"]


def map_key() -> str:
    """Widget key of the map; a new key starts it with an empty selection."""
    return f"world_map_{st.session_state.setdefault('map_generation', 0)}"


def dispatch(event, respondents):
    state = transition(current_state(), event, respondents)
    st.session_state["selection"] = state
    if needs_widget_reset(event, state):
        st.session_state["map_generation"] = st.session_state.get("map_generation", 0) + 1
        st.session_state["preview_country"] = None


# ──────────────────────────────────────────────────────────────────
# MAIN
# ──────────────────────────────────────────────────────────────────

def main():

    # Banner
    st.markdown(
        '<h1 class="banner-title">Hello there</h1>',
        unsafe_allow_html=True,
    )
    st.markdown(
        '<p class="banner-sub">'
        "Let's take a look at the global perspective on gender equality today"
        "</p>",
        unsafe_allow_html=True,
    )

    # ── Load ────────────────────────────────────────────────────
    with st.spinner("⏳ Loading survey responses and world boundaries…"):
        try:
            respondents = load_respondents()
            boundaries = load_boundaries()
        except requests.exceptions.RequestException as exc:
            st.error(f"Network error downloading boundaries: {exc}")
            st.info("Place countries.geo.json inside **data/** to run offline.")
            st.stop()
        except FileNotFoundError as exc:
            st.error(f"Data file not found: {exc}")
            st.info(
                "Ensure ivdata_1126.csv is inside **data/** next to app.py, "
                "or point GENDERLENS_DATA_DIR at the folder holding it."
            )
            st.stop()
        except KeyError as exc:
            st.error(f"Malformed respondent table: {exc}")
            st.stop()
        except Exception as exc:
            st.error(f"Unexpected error loading data: {exc}")
            st.stop()

    state = current_state()

    # ── Event handlers ──────────────────────────────────────────
    def _on_gender_change():
        dispatch(ChangeGender(st.session_state["gender_filter"]), respondents)

    def _on_age_change():
        dispatch(ChangeAge(st.session_state["age_filter"]), respondents)

    def _on_age_reset():
        st.session_state["age_filter"] = ALL_AGES
        dispatch(ChangeAge(ALL_AGES), respondents)

    def _on_preview_change():
        code = st.session_state["preview_country"]
        name = boundary_info(boundaries, code)[0] if code else None
        dispatch(Hover(code, name), respondents)

    def _on_map_select():
        dispatch(map_event(st.session_state.get(map_key()), boundaries), respondents)

    # ── Sidebar ─────────────────────────────────────────────────
    st.session_state.setdefault("gender_filter", state.gender_filter)
    st.session_state.setdefault("age_filter", state.age_filter)

    with st.sidebar:
        st.title("📊 Filters")
        st.markdown("---")

        st.selectbox(
            "Gender",
            list(GENDER_OPTIONS),
            format_func=GENDER_OPTIONS.get,
            key="gender_filter",
            on_change=_on_gender_change,
        )

        st.slider(
            "Age bracket",
            min_value=0, max_value=len(AGE_BRACKETS),
            step=1,
            key="age_filter",
            on_change=_on_age_change,
            help=f"Slide to {len(AGE_BRACKETS)} for all ages.",
        )
        st.caption(age_label(state.age_filter))
        st.button("Reset", on_click=_on_age_reset)

        st.markdown("---")
        codes = sorted(c for c in respondents["country_code"].unique() if c)
        st.selectbox(
            "Preview a country",
            [None] + codes,
            format_func=lambda c: "—" if c is None else boundary_info(boundaries, c)[0],
            key="preview_country",
            on_change=_on_preview_change,
            help="Previews are ignored while a country is pinned on the map.",
        )
        st.button(
            "Clear selection",
            on_click=dispatch,
            args=(ClickBackground(), respondents),
        )

        st.markdown("---")
        summary = get_data_summary(respondents)
        st.caption(
            f"{format_number(summary['total_respondents'])} respondents · "
            f"{summary['total_countries']} countries · "
            f"{summary['total_regions']} cultural regions"
        )

    # ── Aggregations ────────────────────────────────────────────
    filtered = state.filtered(respondents)
    classification = classify_countries(filtered)
    scopes = chart_scopes(state, filtered)

    st.caption(describe_filters(state))

    split = compute_response_split(filtered)
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Respondents", format_number(len(filtered)))
    c2.metric("Countries", str(len(classification.countries)))
    c3.metric("Cultural Regions", str(len(classification.regions)))
    c4.metric("Agree", format_percentage(split.agree_percentage if split else None))

    # ── Map + introduction ──────────────────────────────────────
    col_map, col_intro = st.columns([7, 5])

    with col_map:
        st.subheader("World Map")
        st.plotly_chart(
            create_world_map(classification, boundaries),
            use_container_width=True,
            key=map_key(),
            on_select=_on_map_select,
            selection_mode="points",
        )
        st.plotly_chart(create_color_legend(classification),
                        use_container_width=True)
        if state.tooltip is not None:
            with st.container(border=True):
                st.markdown(format_tooltip(state.tooltip))

    with col_intro:
        st.subheader("Project Introduction and Key Questions")
        st.markdown(
            "This dashboard visualizes the World Values Survey (WVS) to explore "
            "global perceptions of women's roles in family, politics, education "
            "and business. Five key questions uncover biases and track progress "
            "toward gender equality."
        )
        st.markdown("\n".join(f"- **{q}:** {text}" for q, text in QUESTIONS.items()))
        st.info(
            "Q32 is reversed in the data so it reads the same way as the other "
            "questions. **Disagree** represents a higher status for women."
        )

    # ── Charts ──────────────────────────────────────────────────
    col_pies, col_bar = st.columns([7, 5])

    with col_pies:
        for scope in (scopes.country_pie, scopes.region_pie):
            st.plotly_chart(
                create_response_pie(compute_response_split(scope.respondents),
                                    scope.title),
                use_container_width=True,
            )

    with col_bar:
        bar = scopes.question_bar
        st.plotly_chart(
            create_question_bar(compute_question_summaries(bar.respondents),
                                bar.title),
            use_container_width=True,
        )


if __name__ == "__main__":
    main()
