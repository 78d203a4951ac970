"""
Data Loading Module for GenderLens
Handles loading of the survey table and world boundaries with caching
"""

import io
import json
from pathlib import Path

import geopandas as gpd
import pandas as pd
import requests
import streamlit as st

from config import (
    AGE_COL, AGREE, BOUNDARIES_FILE, COUNTRY_COL, DATA_DIR, DISAGREE,
    EXCLUDED_GEO_CODES, GENDER_CODES, GENDER_COL, QUESTION_CODES,
    REGION_COL, REMOTE_URLS, RESPONDENTS_FILE,
)

# Only load columns we actually use
REQUIRED_COLS = [COUNTRY_COL, *QUESTION_CODES, GENDER_COL, AGE_COL, REGION_COL]


def _fetch_remote(url: str) -> io.BytesIO:
    """Download a file into memory."""
    resp = requests.get(url, timeout=60)
    resp.raise_for_status()
    return io.BytesIO(resp.content)


def _open_file(filename: str, data_dir: Path):
    """
    Return a readable source for `filename`.
    Checks data_dir first, then falls back to the remote copy if one is
    configured.
    """
    local_path = Path(data_dir) / filename
    if local_path.exists():
        return local_path
    if filename not in REMOTE_URLS:
        raise FileNotFoundError(local_path)
    return _fetch_remote(REMOTE_URLS[filename])


def clean_respondents(raw: pd.DataFrame) -> pd.DataFrame:
    """
    Turn raw survey columns into the tidy respondent table.

    Unparseable numbers become NaN, and any answer other than 1 (agree)
    or 2 (disagree) is treated as unanswered.

    Args:
        raw: DataFrame with the REQUIRED_COLS survey columns

    Returns:
        DataFrame with country_code, cultural_region, age, gender, Q28..Q32
    """
    missing = [c for c in REQUIRED_COLS if c not in raw.columns]
    if missing:
        raise KeyError(f"Respondent table is missing columns: {missing}")

    gender = pd.to_numeric(raw[GENDER_COL], errors="coerce")
    df = pd.DataFrame({
        "country_code":    raw[COUNTRY_COL].fillna("").astype(str).str.strip(),
        "cultural_region": raw[REGION_COL].fillna("Unknown").astype(str),
        "age":             pd.to_numeric(raw[AGE_COL], errors="coerce"),
        "gender":          gender.map(GENDER_CODES).fillna("unknown"),
    })
    for question in QUESTION_CODES:
        answers = pd.to_numeric(raw[question], errors="coerce")
        df[question] = answers.where(answers.isin([AGREE, DISAGREE]))

    return df.reset_index(drop=True)


@st.cache_data(show_spinner=False)
def load_respondents(data_dir=DATA_DIR) -> pd.DataFrame:
    """
    Load the survey table once per session.

    Args:
        data_dir: Directory holding the respondent CSV

    Returns:
        Tidy respondent DataFrame
    """
    try:
        print("Loading respondent table...")
        raw = pd.read_csv(
            _open_file(RESPONDENTS_FILE, data_dir),
            usecols=lambda c: c in REQUIRED_COLS,
            low_memory=False,
        )
        df = clean_respondents(raw)
        print(f"Respondents loaded: {len(df):,} "
              f"from {df['country_code'].nunique()} countries")
        return df

    except Exception as e:
        st.error(f"Error loading respondents: {str(e)}")
        raise


def parse_boundaries(geojson: dict) -> gpd.GeoDataFrame:
    """
    Build the boundary table from a GeoJSON FeatureCollection.

    Features are indexed by their country code; Bermuda is dropped. The
    anchor_lon / anchor_lat columns hold a point guaranteed to lie inside
    each shape, used to place the country tooltip.
    """
    features = []
    for feature in geojson["features"]:
        code = feature.get("id")
        if code in EXCLUDED_GEO_CODES:
            continue
        props = dict(feature.get("properties") or {})
        props["id"] = code
        props.setdefault("name", code)
        features.append({
            "type": "Feature",
            "geometry": feature.get("geometry"),
            "properties": props,
        })

    gdf = gpd.GeoDataFrame.from_features(features, crs="EPSG:4326")
    gdf = gdf.dropna(subset=["id"]).set_index("id")

    anchors = gdf.geometry.representative_point()
    gdf["anchor_lon"] = anchors.x
    gdf["anchor_lat"] = anchors.y

    print(f"Boundaries loaded: {len(gdf):,} shapes")
    return gdf


@st.cache_data(show_spinner=False)
def load_boundaries(data_dir=DATA_DIR) -> gpd.GeoDataFrame:
    """Load world country boundaries, local file first, then remote."""
    try:
        print("Loading country boundaries...")
        source = _open_file(BOUNDARIES_FILE, data_dir)
        if isinstance(source, Path):
            with open(source) as fh:
                geojson = json.load(fh)
        else:
            geojson = json.loads(source.read().decode("utf-8"))
        return parse_boundaries(geojson)

    except Exception as e:
        st.error(f"Error loading boundaries: {str(e)}")
        raise


def boundary_info(boundaries: gpd.GeoDataFrame, country_code):
    """
    Name and tooltip anchor of a country.

    Returns:
        (name, (lon, lat)) or (country_code, None) when the country has no shape
    """
    rows = boundaries[boundaries.index == country_code]
    if rows.empty:
        return country_code, None
    row = rows.iloc[0]
    return row["name"], (float(row["anchor_lon"]), float(row["anchor_lat"]))


def get_data_summary(df):
    """
    Generate summary statistics about the loaded data.

    Args:
        df: Respondent DataFrame

    Returns:
        Dict with summary statistics
    """
    summary = {
        'total_respondents': len(df),
        'total_countries': df['country_code'].nunique(),
        'total_regions': df['cultural_region'].nunique(),
        'missing_age': int(df['age'].isna().sum()),
        'unknown_gender': int((df['gender'] == 'unknown').sum()),
        'missing_answers': int(df[QUESTION_CODES].isna().sum().sum()),
    }
    return summary
