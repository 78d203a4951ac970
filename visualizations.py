"""
Visualization Module for GenderLens
All Plotly chart generation functions
"""

import plotly.express as px
import plotly.graph_objects as go
import pandas as pd

from colors import build_color_table, color_for
from config import (
    BAR_COLORS, BORDER_COLOR, NO_DATA_COLOR, PIE_COLORS, QUESTIONS,
    TIER_LABELS,
)
from data_loader import boundary_info
from data_processor import has_question_data
from selection import Click, ClickBackground


def _empty_figure(message, height=300):
    """Blank figure carrying a centred message."""
    fig = go.Figure()
    fig.add_annotation(
        text=message,
        xref="paper", yref="paper", x=0.5, y=0.5,
        showarrow=False, font=dict(size=15),
    )
    fig.update_layout(
        height=height,
        xaxis=dict(visible=False),
        yaxis=dict(visible=False),
    )
    return fig


def _discrete_colorscale(colors):
    """Step colourscale where integer z == i paints colors[i]."""
    m = len(colors)
    scale = []
    for i, color in enumerate(colors):
        scale.append([i / m, color])
        scale.append([(i + 1) / m, color])
    return scale


def build_map_frame(classification, boundaries):
    """
    One row per boundary shape with its fill colour and tooltip fields.

    Args:
        classification: CountryClassification of the filtered respondents
        boundaries: GeoDataFrame indexed by country code

    Returns:
        DataFrame with country_code, name, color, has_data, cultural_region,
        average_score, group_level
    """
    rows = []
    for code, name in zip(boundaries.index, boundaries["name"]):
        summary = classification.countries.get(code)
        if summary is None:
            rows.append({
                "country_code": code, "name": name, "color": NO_DATA_COLOR,
                "has_data": False, "cultural_region": "",
                "average_score": float("nan"), "group_level": "No data",
            })
            continue
        region_index = classification.region_indices[summary.cultural_region]
        rows.append({
            "country_code": code,
            "name": name,
            "color": color_for(region_index, summary.score_tier),
            "has_data": True,
            "cultural_region": summary.cultural_region,
            "average_score": summary.average_score,
            "group_level": TIER_LABELS[summary.score_tier],
        })
    return pd.DataFrame(rows)


def create_world_map(classification, boundaries):
    """
    Create the choropleth world map.

    Fill colour blends the country's cultural-region hue with its score
    tier; countries absent from the filtered survey are grey.

    Args:
        classification: CountryClassification from classify_countries()
        boundaries: GeoDataFrame from load_boundaries()

    Returns:
        Plotly figure
    """
    frame = build_map_frame(classification, boundaries)
    if frame.empty:
        return _empty_figure("No map data available.", height=570)

    fig = px.choropleth(
        frame,
        geojson=boundaries.__geo_interface__,
        locations="country_code",
        color="color",
        color_discrete_map="identity",
        hover_name="name",
        hover_data={
            "cultural_region": True,
            "group_level": True,
            "average_score": ":.2f",
            "country_code": False,
            "color": False,
        },
        labels={
            "cultural_region": "Cultural Region",
            "group_level": "Group Level",
            "average_score": "Average Score",
        },
        projection="mercator",
    )
    fig.update_traces(marker_line_color=BORDER_COLOR, marker_line_width=0.5)
    fig.update_geos(visible=False, lataxis_range=[-60, 85])
    fig.update_layout(
        height=570,
        margin=dict(l=0, r=0, t=10, b=0),
        showlegend=False,
        clickmode="event+select",
    )
    return fig


def map_event(payload, boundaries):
    """
    Translate the map's on_select payload into a selection event.

    An empty or missing selection is a background click; with several
    points selected the most recent one wins.
    """
    points = (payload or {}).get("selection", {}).get("points", [])
    codes = [p.get("location") for p in points if p.get("location")]
    if not codes:
        return ClickBackground()
    name, anchor = boundary_info(boundaries, codes[-1])
    return Click(codes[-1], name, anchor)


def create_color_legend(classification):
    """
    Create the region × score-tier legend grid.

    Rows are score tiers (Low at the bottom), columns are cultural regions
    in index order.
    """
    regions = classification.regions
    n = len(regions)
    if n == 0:
        return _empty_figure("No regions to show.", height=220)

    table = build_color_table(n)
    flat = [color for row in table for color in row]
    z = [[tier * n + i for i in range(n)] for tier in range(len(table))]
    text = [[f"{region} · {label}" for region in regions] for label in TIER_LABELS]

    fig = go.Figure(go.Heatmap(
        z=z,
        x=regions,
        y=TIER_LABELS,
        text=text,
        hoverinfo="text",
        colorscale=_discrete_colorscale(flat),
        zmin=-0.5,
        zmax=len(flat) - 0.5,
        showscale=False,
        xgap=1,
        ygap=1,
    ))
    fig.update_layout(
        height=220,
        margin=dict(l=60, r=10, t=10, b=90),
        xaxis=dict(tickangle=-45, tickfont=dict(size=10)),
        yaxis=dict(tickfont=dict(size=10)),
    )
    return fig


def create_response_pie(split, title):
    """
    Create the Agree / Disagree pie chart.

    Args:
        split: ResponseSplit or None
        title: Chart title

    Returns:
        Plotly figure
    """
    if split is None:
        fig = _empty_figure("No responses for this selection.")
        fig.update_layout(title=title)
        return fig

    fig = go.Figure(go.Pie(
        labels=["Agree", "Disagree"],
        values=[split.agree_percentage, split.disagree_percentage],
        marker=dict(
            colors=[PIE_COLORS["Agree"], PIE_COLORS["Disagree"]],
            line=dict(color="#999999", width=1),
        ),
        sort=False,
        direction="clockwise",
        texttemplate="%{label}: %{value:.1f}%",
        hovertemplate="%{label}: %{value:.1f}%<extra></extra>",
    ))
    fig.update_layout(
        title=title,
        height=300,
        margin=dict(l=10, r=10, t=50, b=10),
        legend=dict(orientation="v", x=1.0, y=1.0),
    )
    return fig


def create_question_bar(summaries, title):
    """
    Create the stacked per-question bar chart.

    Disagree is stacked at the bottom so that the women's-status reading
    sits on the baseline.

    Args:
        summaries: List of QuestionSummary
        title: Chart title

    Returns:
        Plotly figure
    """
    if not has_question_data(summaries):
        fig = _empty_figure("No responses for this selection.", height=600)
        fig.update_layout(title=title)
        return fig

    questions = [s.question for s in summaries]
    statements = [QUESTIONS[q] for q in questions]

    fig = go.Figure()
    fig.add_trace(go.Bar(
        name="Disagree",
        x=questions,
        y=[s.disagree_percentage for s in summaries],
        marker_color=BAR_COLORS["Disagree"],
        customdata=list(zip(statements, [s.disagreed_responses for s in summaries])),
        hovertemplate="<b>%{x}</b> %{customdata[0]}<br>"
                      "Disagree: %{y:.1f}% (n=%{customdata[1]:,})<extra></extra>",
    ))
    fig.add_trace(go.Bar(
        name="Agree",
        x=questions,
        y=[s.agree_percentage for s in summaries],
        marker=dict(color=BAR_COLORS["Agree"], line=dict(color="#999999", width=1)),
        customdata=list(zip(statements, [s.agreed_responses for s in summaries])),
        hovertemplate="<b>%{x}</b> %{customdata[0]}<br>"
                      "Agree: %{y:.1f}% (n=%{customdata[1]:,})<extra></extra>",
    ))
    fig.update_layout(
        title=title,
        barmode="stack",
        height=600,
        yaxis=dict(range=[0, 100], title="Percentage (%)"),
        xaxis_title="",
        legend=dict(orientation="h", yanchor="top", y=-0.08, xanchor="left", x=0),
        font=dict(size=12),
    )
    return fig
