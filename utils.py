"""
Utility Functions for GenderLens
Helper functions for labels and formatting
"""

import pandas as pd

from config import AGE_BRACKETS, ALL_AGES, GENDER_OPTIONS


def format_number(num):
    """Format number with thousands separator."""
    if pd.isna(num):
        return "N/A"
    return f"{num:,.0f}"


def format_percentage(num):
    """Format number as percentage."""
    if pd.isna(num):
        return "N/A"
    return f"{num:.1f}%"


def age_label(bracket):
    """Slider caption for an age bracket index."""
    if bracket == ALL_AGES:
        return "All Ages"
    lo, hi = AGE_BRACKETS[bracket]
    return f"Age {lo}-{hi}"


def describe_filters(state):
    """One-line summary of the active filters and drill-down."""
    parts = [GENDER_OPTIONS[state.gender_filter], age_label(state.age_filter)]
    if state.active_country_name:
        parts.append(state.active_country_name)
    if state.active_region:
        parts.append(state.active_region)
    return " · ".join(parts)


def format_tooltip(payload):
    """
    Render a tooltip payload as markdown lines.

    Args:
        payload: TooltipPayload from a country click

    Returns:
        Markdown string
    """
    return (
        f"#### {payload.country_name}\n\n"
        f"Respondents: {format_number(payload.respondent_count)}  \n"
        f"Group Level: {payload.group_level}  \n"
        f"Average Score: {payload.average_score:.2f}"
    )
