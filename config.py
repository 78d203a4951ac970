"""
Configuration for GenderLens
Data locations, question catalogue, filter brackets and chart colours
"""

import os
from pathlib import Path

# ──────────────────────────────────────────────────────────────────
# DATA SOURCES
# ──────────────────────────────────────────────────────────────────
DATA_DIR = Path(os.environ.get("GENDERLENS_DATA_DIR", "data"))

RESPONDENTS_FILE = "ivdata_1126.csv"
BOUNDARIES_FILE = "countries.geo.json"

# Remote fallback when the file is not present under DATA_DIR
REMOTE_URLS = {
    BOUNDARIES_FILE: (
        "https://gist.githubusercontent.com/hogwild/"
        "26558c07f9e4e89306f864412fbdba1d/raw/"
        "5458902712c01c79f36dc28db33e345ee71487eb/countries.geo.json"
    ),
}

# Raw survey column → tidy column
COUNTRY_COL = "B_COUNTRY_ALPHA"
GENDER_COL = "Q260"
AGE_COL = "Q262"
REGION_COL = "cultural_region"

# Bermuda ships in the boundary file under both codes and is never drawn
EXCLUDED_GEO_CODES = frozenset({"BM", "BMU"})

# ──────────────────────────────────────────────────────────────────
# QUESTIONS
# ──────────────────────────────────────────────────────────────────
# Q32 is stored already reversed so that "Disagree" always reads as the
# answer granting women higher status.
QUESTIONS = {
    "Q28": "When a mother works for pay, the children suffer.",
    "Q29": "Men make better political leaders than women do, generally.",
    "Q30": "A university education is more important for a boy than for a girl.",
    "Q31": "Men make better business executives than women, generally.",
    "Q32": "Being a housewife is just as fulfilling as working for pay.",
}
QUESTION_CODES = list(QUESTIONS)

AGREE = 1
DISAGREE = 2

# ──────────────────────────────────────────────────────────────────
# FILTERS
# ──────────────────────────────────────────────────────────────────
# Half-open [min, max) age brackets; index len(AGE_BRACKETS) means all ages
AGE_BRACKETS = [
    (0, 20),
    (20, 30),
    (30, 40),
    (40, 50),
    (50, 60),
    (60, 103),
]
ALL_AGES = len(AGE_BRACKETS)

GENDER_CODES = {1: "male", 2: "female"}
GENDER_OPTIONS = {"all": "All Genders", "male": "Male", "female": "Female"}

# ──────────────────────────────────────────────────────────────────
# MAP COLOURS
# ──────────────────────────────────────────────────────────────────
TIER_LABELS = ["Low", "Medium", "High"]
TIER_RAMP_STOPS = [0.3, 0.6, 0.9]
BLEND_WEIGHT = 0.5
NO_DATA_COLOR = "#EEEEEE"
BORDER_COLOR = "#CCCCCC"

# ──────────────────────────────────────────────────────────────────
# CHART COLOURS
# ──────────────────────────────────────────────────────────────────
PIE_COLORS = {"Agree": "#EEEEEE", "Disagree": "#FFDC68"}
BAR_COLORS = {"Disagree": "#658EC4", "Agree": "#EEEEEE"}
