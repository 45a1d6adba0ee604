# SPDX-License-Identifier: GPL-3.0-or-later

# Copyright (C) 2026 Darkmine Pty Ltd

# This file is part of drillcraft.

# drillcraft is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

# drillcraft is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.

# You should have received a copy of the GNU General Public License
# along with drillcraft.  If not, see <https://www.gnu.org/licenses/>.

"""Data quality scoring for ingested drilling records.

Four scores on a 0-100 scale:

- completeness: share of supplied values across rpm, wob, pump output and depth
- conformity: share of expected column names present in the source header
- statistics: starts at 100 and loses 10 for each of wob, rpm and depth whose
  population variance exceeds twice its mean, never dropping below 75
- overall: the rounded mean of the other three

The statistics score is intentionally optimistic; its floor is part of the
contract and not a defect.
"""

import logging
import math

import numpy as np
import pandas as pd

from drillcraft.datamodel import DEPTH, PUMP_OUTPUT, RPM, TIMESTAMP, WOB
from drillcraft.drill.data import RecordSet, _frame, parse_with_default

logger = logging.getLogger(__name__)

COMPLETENESS_FIELDS = (RPM, WOB, PUMP_OUTPUT, DEPTH)
CONFORMITY_COLUMNS = (WOB, DEPTH, TIMESTAMP, RPM)
STATISTICS_FIELDS = (WOB, RPM, DEPTH)

STATISTICS_PENALTY = 10
STATISTICS_FLOOR = 75

# Reported alongside placeholder records when ingestion fails
PLACEHOLDER_METRICS = {
    "completeness": 90,
    "conformity": 92,
    "statistics": 95,
    "overall": 92,
}


def _round(value):
    # Half-up, so 62.5 scores 63
    return int(math.floor(value + 0.5))


def _audit_tables(records):
    if isinstance(records, RecordSet):
        return records.frame, records.presence, records.source_columns
    df = _frame(records)
    presence = pd.DataFrame(index=df.index)
    for field in COMPLETENESS_FIELDS:
        if field not in df.columns:
            presence[field] = False
            continue
        col = df[field]
        presence[field] = col.notna() & (col.astype(str).str.strip() != "")
    return df, presence, list(df.columns)


def completeness_score(presence, total_rows):
    if total_rows == 0:
        return 0
    percentages = []
    for field in COMPLETENESS_FIELDS:
        present = int(presence[field].sum()) if field in presence.columns else 0
        percentages.append(present / total_rows * 100)
    return _round(sum(percentages) / len(percentages))


def conformity_score(columns):
    names = [str(col).lower() for col in columns]
    matched = sum(1 for required in CONFORMITY_COLUMNS if any(required in name for name in names))
    return _round(matched / len(CONFORMITY_COLUMNS) * 100)


def statistics_score(frame, presence=None):
    result = 100
    for field in STATISTICS_FIELDS:
        if field not in frame.columns:
            continue
        values, parsed = parse_with_default(frame[field])
        if presence is not None and field in presence.columns:
            parsed = parsed & presence[field].astype(bool)
        values = values[parsed].to_numpy(dtype=float)
        if values.size == 0:
            continue
        mean = values.mean()
        variance = np.var(values)
        if variance > 2 * mean:
            result -= STATISTICS_PENALTY
    return max(result, STATISTICS_FLOOR)


def overall_score(completeness, conformity, statistics):
    return _round((completeness + conformity + statistics) / 3)


def score(records):
    """Score a RecordSet (or plain DataFrame) and return the quality metrics dict.

    A DataFrame is audited from its own values: NaN or blank cells count as
    missing, and its column names stand in for the source header.
    """
    frame, presence, columns = _audit_tables(records)
    total = len(frame)
    if total == 0:
        return {"completeness": 0, "conformity": 0, "statistics": 0, "overall": 0}

    completeness = completeness_score(presence, total)
    conformity = conformity_score(columns)
    statistics = statistics_score(frame, presence)
    metrics = {
        "completeness": completeness,
        "conformity": conformity,
        "statistics": statistics,
        "overall": overall_score(completeness, conformity, statistics),
    }
    logger.debug("Scored %d rows: %s", total, metrics)
    return metrics


def quality_grade(value):
    """Bucket a 0-100 score into 'good', 'warning' or 'poor'."""
    if value >= 95:
        return "good"
    if value >= 85:
        return "warning"
    return "poor"
