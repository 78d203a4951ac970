"""
Data Processing Module for GenderLens
Filters, agreement percentages and the country score classification
"""

import math
from dataclasses import dataclass, field
from typing import NamedTuple, Optional

import numpy as np
import pandas as pd

from config import AGE_BRACKETS, AGREE, ALL_AGES, DISAGREE, QUESTION_CODES


class ResponseSplit(NamedTuple):
    agree_percentage: float
    disagree_percentage: float


class QuestionSummary(NamedTuple):
    question: str
    agreed_responses: int
    disagreed_responses: int
    total_responses: int
    agree_percentage: float
    disagree_percentage: float


@dataclass
class CountrySummary:
    cultural_region: str
    responses: list = field(default_factory=list)
    average_score: float = 0.0
    score_tier: int = 0


class CountryClassification(NamedTuple):
    countries: dict
    regions: list
    region_indices: dict


def _answers(respondents: pd.DataFrame) -> pd.DataFrame:
    """Q28..Q32 block; missing columns read as unanswered."""
    return respondents.reindex(columns=QUESTION_CODES).astype(float)


# ──────────────────────────────────────────────────────────────────
# FILTERS
# ──────────────────────────────────────────────────────────────────

def filter_by_age(respondents: pd.DataFrame, bracket: int) -> pd.DataFrame:
    """
    Keep respondents whose age falls in the half-open bracket.

    Args:
        respondents: Respondent table
        bracket: Index into AGE_BRACKETS, or ALL_AGES for no filtering

    Returns:
        Filtered DataFrame (respondents without an age never match a bracket)
    """
    if bracket == ALL_AGES:
        return respondents
    if not 0 <= bracket < ALL_AGES:
        raise ValueError(f"Unknown age bracket: {bracket!r}")
    lo, hi = AGE_BRACKETS[bracket]
    age = respondents["age"]
    return respondents[(age >= lo) & (age < hi)]


def filter_by_gender(respondents: pd.DataFrame, gender: str) -> pd.DataFrame:
    if gender == "all":
        return respondents
    if gender not in ("male", "female"):
        raise ValueError(f"Unknown gender filter: {gender!r}")
    return respondents[respondents["gender"] == gender]


def filter_respondents(respondents, age_bracket=ALL_AGES, gender="all"):
    """Apply the age filter, then the gender filter."""
    return filter_by_gender(filter_by_age(respondents, age_bracket), gender)


def respondents_in_country(respondents, country_code):
    return respondents[respondents["country_code"] == country_code]


def respondents_in_region(respondents, region):
    return respondents[respondents["cultural_region"] == region]


def first_region(respondents, country_code) -> Optional[str]:
    """Cultural region of the first respondent from a country, if any."""
    rows = respondents_in_country(respondents, country_code)
    if rows.empty:
        return None
    return rows["cultural_region"].iloc[0]


# ──────────────────────────────────────────────────────────────────
# AGREEMENT PERCENTAGES
# ──────────────────────────────────────────────────────────────────

def compute_response_split(respondents: pd.DataFrame) -> Optional[ResponseSplit]:
    """
    Pooled agree / disagree split across all five questions.

    Only answers coded 1 (agree) or 2 (disagree) are tallied.

    Returns:
        ResponseSplit, or None when there is nothing to tally
    """
    answers = _answers(respondents)
    agree_count = int((answers == AGREE).sum().sum())
    total_count = int(answers.isin([AGREE, DISAGREE]).sum().sum())

    if total_count == 0:
        return None

    agree = agree_count / total_count * 100
    return ResponseSplit(agree, 100 - agree)


def compute_question_summaries(respondents: pd.DataFrame) -> list:
    """
    Per-question agree / disagree percentages.

    The denominator is the size of the subset, including respondents who
    skipped the question. With an empty subset the percentages are NaN.
    """
    answers = _answers(respondents)
    total = len(answers)

    summaries = []
    for question in QUESTION_CODES:
        col = answers[question]
        agreed = int((col == AGREE).sum())
        disagreed = int((col == DISAGREE).sum())
        agree = agreed / total * 100 if total else np.nan
        summaries.append(QuestionSummary(
            question=question,
            agreed_responses=agreed,
            disagreed_responses=disagreed,
            total_responses=total,
            agree_percentage=agree,
            disagree_percentage=100 - agree,
        ))
    return summaries


def has_question_data(summaries) -> bool:
    """True when the bar chart has something to draw."""
    return any(s.total_responses > 0 for s in summaries)


# ──────────────────────────────────────────────────────────────────
# COUNTRY CLASSIFICATION
# ──────────────────────────────────────────────────────────────────

def classify_countries(respondents: pd.DataFrame) -> CountryClassification:
    """
    Score every country and split them into Low / Medium / High tiers.

    Each respondent is scored by the mean of the questions they answered;
    a country's score is the mean of its respondents' scores (0 when none
    answered anything). Countries are sorted ascending with a stable sort
    and cut into three contiguous tiers of ceil(k / 3); the last tier takes
    whatever remains.

    Args:
        respondents: Filtered respondent table

    Returns:
        CountryClassification with per-country summaries, cultural regions
        in first-seen order, and region → index mapping
    """
    if respondents.empty:
        return CountryClassification({}, [], {})

    row_scores = _answers(respondents).mean(axis=1, skipna=True)
    scored = pd.DataFrame({
        "country_code": respondents["country_code"].to_numpy(),
        "cultural_region": respondents["cultural_region"].to_numpy(),
        "row_score": row_scores.to_numpy(),
    })

    countries = {}
    for code, group in scored.groupby("country_code", sort=False, dropna=False):
        responses = group["row_score"].dropna().tolist()
        countries[code] = CountrySummary(
            cultural_region=group["cultural_region"].iloc[0],
            responses=responses,
            average_score=float(np.mean(responses)) if responses else 0.0,
        )

    # sorted() is stable and hands back the dict's own keys, NaN included
    ranked = sorted(countries, key=lambda code: countries[code].average_score)
    tier_size = math.ceil(len(ranked) / 3)
    for rank, code in enumerate(ranked):
        countries[code].score_tier = rank // tier_size

    regions = list(pd.unique(scored["cultural_region"]))
    region_indices = {region: i for i, region in enumerate(regions)}

    return CountryClassification(countries, regions, region_indices)
