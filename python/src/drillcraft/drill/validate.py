# SPDX-License-Identifier: GPL-3.0-or-later

# Copyright (C) 2026 Darkmine Pty Ltd

# This file is part of drillcraft.

# drillcraft is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the license, or
# (at your option) any later version.

# drillcraft is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.

# You should have received a copy of the GNU General Public License
# along with drillcraft.  If not, see <https://www.gnu.org/licenses/>.

"""QA/QC helpers for drilling records and depth ranges.

These only report issues; nothing here rejects or repairs data.
"""

import math

import pandas as pd

from drillcraft.datamodel import CANONICAL_FIELDS, DEPTH
from drillcraft.drill.data import RecordSet


def validate_ranges(ranges, label="range"):
    issues = []
    seen = set()
    valid = []
    for depth_range in ranges:
        if depth_range.id in seen:
            issues.append({"range_id": depth_range.id, "type": f"duplicate_{label}_id", "range": depth_range.to_dict()})
        seen.add(depth_range.id)
        start = depth_range.start_depth
        end = depth_range.end_depth
        if math.isnan(start) or math.isnan(end):
            issues.append({"range_id": depth_range.id, "type": "missing_depth", "range": depth_range.to_dict()})
            continue
        if start > end:
            issues.append({"range_id": depth_range.id, "type": "inverted_range", "range": depth_range.to_dict()})
            continue
        valid.append(depth_range)

    prev = None
    for depth_range in sorted(valid, key=lambda r: (r.start_depth, r.end_depth)):
        if prev is not None and depth_range.start_depth < prev.end_depth:
            issues.append({
                "range_id": depth_range.id,
                "type": "overlap",
                "previous_id": prev.id,
                "range": depth_range.to_dict(),
            })
        if prev is None or depth_range.end_depth > prev.end_depth:
            prev = depth_range
    return issues


def validate_records(records, depth_col=DEPTH):
    """Report depth ordering problems in a record set.

    Issue types: ``non_monotonic_depth`` (once), ``duplicate_depth`` (per
    repeated value) and ``non_positive_depth`` (count of rows dropped at
    ingestion, RecordSet input only).
    """
    issues = []
    if isinstance(records, RecordSet):
        dropped = int((records.frame[depth_col] <= 0).sum()) if depth_col in records.frame.columns else 0
        if dropped:
            issues.append({"type": "non_positive_depth", "count": dropped})
        records = records.records
    if records.empty or depth_col not in records.columns:
        return issues

    depths = pd.Series(records[depth_col].values)
    if not depths.is_monotonic_increasing:
        issues.append({"type": "non_monotonic_depth"})
    repeated = depths[depths.duplicated()].unique()
    for depth in repeated:
        issues.append({"type": "duplicate_depth", "depth": float(depth)})
    return issues


def report_missing_columns(df, required=CANONICAL_FIELDS):
    if isinstance(df, RecordSet):
        # Canonical columns always exist after ingestion; missing means nothing was supplied
        supplied = [col for col in df.presence.columns if df.presence[col].any()]
        return [col for col in required if col not in supplied]
    missing = [col for col in required if col not in df.columns]
    return missing
