import numpy as np
import pandas as pd
import pytest

from config import QUESTION_CODES

COLUMNS = ["country_code", "cultural_region", "age", "gender", *QUESTION_CODES]


@pytest.fixture
def make_respondents():
    """Build a tidy respondent frame from short row dicts."""

    def _make(rows):
        records = []
        for row in rows:
            record = {
                "country_code": row["country"],
                "cultural_region": row.get("region", "Unknown"),
                "age": row.get("age", np.nan),
                "gender": row.get("gender", "unknown"),
            }
            answers = row.get("answers", [None] * 5)
            for question, answer in zip(QUESTION_CODES, answers):
                record[question] = np.nan if answer is None else float(answer)
            records.append(record)
        return pd.DataFrame(records, columns=COLUMNS)

    return _make


@pytest.fixture
def survey(make_respondents):
    return make_respondents([
        {"country": "USA", "region": "English-speaking", "age": 25, "gender": "male",
         "answers": [1, 2, 1, 2, None]},
        {"country": "USA", "region": "English-speaking", "age": 45, "gender": "female",
         "answers": [2, 2, None, None, None]},
        {"country": "DEU", "region": "Protestant Europe", "age": 35, "gender": "female",
         "answers": [2, 2, 2, 2, 2]},
        {"country": "JPN", "region": "Confucian", "age": 65, "gender": "male",
         "answers": [1, 1, 1, 1, 1]},
        {"country": "GBR", "region": "English-speaking", "age": 15, "gender": "male",
         "answers": [1, 2, 2, 2, 2]},
    ])
