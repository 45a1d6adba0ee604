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

"""Tests for QA/QC reports."""

import pandas as pd

from drillcraft.drill import data, validate
from drillcraft.drill.ranges import DepthRange


def test_validate_ranges_reports_each_problem():
    sections = [
        DepthRange("a", 0, 100),
        DepthRange("b", 50, 150),
        DepthRange("c", 300, 200),
        DepthRange("a", 400, 500),
        DepthRange("d", "", 10),
    ]
    issues = validate.validate_ranges(sections, label="section")
    types = sorted((issue["range_id"], issue["type"]) for issue in issues)
    assert types == [
        ("a", "duplicate_section_id"),
        ("b", "overlap"),
        ("c", "inverted_range"),
        ("d", "missing_depth"),
    ]


def test_validate_ranges_accepts_touching_ranges():
    assert validate.validate_ranges([DepthRange("1", 0, 100), DepthRange("2", 100, 200)]) == []


def test_validate_records_reports_depth_problems():
    record_set = data.ingest("depth,wob,rpm,rop\n1000,1,1,1\n0,1,1,1\n999,1,1,1\n999,2,2,2\n")
    issues = validate.validate_records(record_set)
    assert {"type": "non_positive_depth", "count": 1} in issues
    assert {"type": "non_monotonic_depth"} in issues
    assert {"type": "duplicate_depth", "depth": 999.0} in issues


def test_validate_records_clean_series():
    assert validate.validate_records(data.placeholder_records()) == []


def test_report_missing_columns():
    record_set = data.ingest("depth,wob\n1000,1\n")
    assert validate.report_missing_columns(record_set) == ["rpm", "rop"]
    assert validate.report_missing_columns(pd.DataFrame({"depth": [1.0]})) == ["wob", "rpm", "rop"]
