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

"""Tests for data quality scoring."""

import numpy as np
import pandas as pd

from drillcraft.drill import data, quality


def test_score_empty_input_is_all_zero():
    expected = {"completeness": 0, "conformity": 0, "statistics": 0, "overall": 0}
    assert quality.score(data.RecordSet()) == expected
    assert quality.score(pd.DataFrame()) == expected


def test_score_ingested_record_set():
    record_set = data.ingest(
        "depth,wob,rpm,pump output,time\n"
        "1000,1,,400,t0\n"
        "1001,,,,t1\n"
    )
    metrics = quality.score(record_set)
    # rpm 0%, wob 50%, pump output 50%, depth 100%
    assert metrics["completeness"] == 50
    # timestamp is the only required name missing
    assert metrics["conformity"] == 75
    assert metrics["statistics"] == 100
    assert metrics["overall"] == 75


def test_completeness_counts_rows_dropped_for_depth():
    record_set = data.ingest("depth,wob,rpm,pump output\n1000,1,1,1\n,1,1,1\n")
    assert len(record_set) == 1
    # depth supplied on 1 of 2 rows -> (100 + 100 + 100 + 50) / 4
    assert quality.score(record_set)["completeness"] == 88


def test_score_dataframe_rounds_half_up():
    df = pd.DataFrame({
        "depth": [1000.0, np.nan],
        "wob": [1.0, 2.0],
        "rpm": [1.0, np.nan],
        "pump_output": [np.nan, 400.0],
    })
    metrics = quality.score(df)
    assert metrics["completeness"] == 63
    assert metrics["conformity"] == 75
    assert metrics["statistics"] == 100
    assert metrics["overall"] == 79


def test_conformity_uses_case_insensitive_substrings():
    assert quality.conformity_score(["Timestamp", "WOB (klbs)", "Bit Depth", "Surface RPM"]) == 100
    assert quality.conformity_score(["Time", "Weight on Bit"]) == 0


def test_statistics_penalty_per_field():
    df = pd.DataFrame({"wob": [0.0, 100.0], "rpm": [100.0, 100.0], "depth": [1000.0, 1000.0]})
    assert quality.statistics_score(df) == 90


def test_statistics_never_below_floor():
    df = pd.DataFrame({"wob": [0.0, 100.0], "rpm": [0.0, 100.0], "depth": [1.0, 1000.0]})
    assert quality.statistics_score(df) == 75


def test_overall_is_rounded_mean():
    assert quality.overall_score(50, 75, 100) == 75
    assert quality.overall_score(90, 100, 100) == 97
    assert quality.overall_score(0, 0, 75) == 25


def test_score_bounds_hold_for_random_inputs():
    rng = np.random.default_rng(7)
    for _ in range(25):
        n = int(rng.integers(1, 40))
        df = pd.DataFrame({
            "depth": rng.normal(1000, 500, n),
            "wob": rng.normal(10, 30, n),
            "rpm": rng.normal(100, 80, n),
            "pump_output": rng.choice([np.nan, 500.0], n),
        })
        metrics = quality.score(df)
        for key in ("completeness", "conformity", "statistics", "overall"):
            assert 0 <= metrics[key] <= 100
        assert metrics["statistics"] >= 75
        mean = (metrics["completeness"] + metrics["conformity"] + metrics["statistics"]) / 3
        assert metrics["overall"] == round(mean)


def test_score_is_deterministic():
    record_set = data.placeholder_records()
    assert quality.score(record_set) == quality.score(record_set)


def test_quality_grade_thresholds():
    assert quality.quality_grade(100) == "good"
    assert quality.quality_grade(95) == "good"
    assert quality.quality_grade(94) == "warning"
    assert quality.quality_grade(85) == "warning"
    assert quality.quality_grade(84) == "poor"


def test_placeholder_metrics_are_consistent():
    metrics = quality.PLACEHOLDER_METRICS
    mean = (metrics["completeness"] + metrics["conformity"] + metrics["statistics"]) / 3
    assert metrics["overall"] == round(mean)
