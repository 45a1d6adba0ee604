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

"""Named depth ranges (sections and formations) and depth-range selection."""

import logging
import math
import re

from drillcraft.datamodel import (
    DEPTH,
    END_DEPTH,
    FORMATION_NAME,
    HOLE_DIAMETER,
    LABEL,
    RANGE_ID,
    START_DEPTH,
)
from drillcraft.drill.data import RecordSet, _clean_raw, _frame, standardize_columns

logger = logging.getLogger(__name__)

FILTER_NONE = "none"
FILTER_SECTION = "section"
FILTER_FORMATION = "formation"
FILTER_MODES = (FILTER_NONE, FILTER_SECTION, FILTER_FORMATION)
FILTER_ALIASES = {"all": FILTER_NONE}

# Column name variations accepted when sections/formations are pasted from a spreadsheet
RANGE_COLUMN_MAP = {
    RANGE_ID: ["id", "range id", "section id", "formation id"],
    START_DEPTH: ["start depth", "startdepth", "start", "from", "top", "top depth"],
    END_DEPTH: ["end depth", "enddepth", "end", "to", "bottom", "base", "bottom depth"],
    HOLE_DIAMETER: ["hole diameter", "holediameter", "diameter", "hole size", "bit size"],
    FORMATION_NAME: ["formation name", "formationname", "formation", "name"],
    LABEL: ["label"],
}

_LEADING_NUMBER = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def parse_depth(value):
    """Parse the leading number of ``value`` ("1200ft" -> 1200.0); NaN if there is none."""
    if isinstance(value, (int, float)):
        return float(value)
    match = _LEADING_NUMBER.match(str(value)) if value is not None else None
    if match is None:
        return math.nan
    return float(match.group(0))


def _format_depth(value):
    if math.isnan(value):
        return ""
    return f"{value:g}"


class DepthRange:
    """An operator-defined depth interval, either a drilling section or a formation.

    ``start_depth <= end_depth`` is assumed but not enforced; an inverted
    range simply selects nothing.
    """

    def __init__(self, range_id, start_depth, end_depth, label=None, hole_diameter=None, formation_name=None):
        self.id = str(range_id)
        self.start_depth = parse_depth(start_depth)
        self.end_depth = parse_depth(end_depth)
        self.hole_diameter = hole_diameter
        self.formation_name = formation_name
        if label is None:
            label = formation_name or f"{_format_depth(self.start_depth)}-{_format_depth(self.end_depth)}ft"
        self.label = label

    def contains(self, depth):
        return self.start_depth <= depth <= self.end_depth

    def to_dict(self):
        return {
            RANGE_ID: self.id,
            START_DEPTH: self.start_depth,
            END_DEPTH: self.end_depth,
            LABEL: self.label,
            HOLE_DIAMETER: self.hole_diameter,
            FORMATION_NAME: self.formation_name,
        }

    def __eq__(self, other):
        if not isinstance(other, DepthRange):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"DepthRange(id={self.id!r}, start_depth={self.start_depth}, end_depth={self.end_depth}, label={self.label!r})"


def _load_ranges(rows, extra_field):
    df = standardize_columns(_clean_raw(_frame(rows)), column_map=RANGE_COLUMN_MAP)
    ranges = []
    for position, row in enumerate(df.to_dict("records"), start=1):
        range_id = row.get(RANGE_ID) or str(position)
        extra = row.get(extra_field) or None
        kwargs = {extra_field: extra}
        ranges.append(
            DepthRange(
                range_id,
                row.get(START_DEPTH, ""),
                row.get(END_DEPTH, ""),
                label=row.get(LABEL) or None,
                **kwargs,
            )
        )
    return ranges


def load_sections(rows):
    """Build section ranges from pasted table rows (DataFrame or iterable of mappings).

    Rows without an id are numbered by position, starting at 1.
    """
    return _load_ranges(rows, HOLE_DIAMETER)


def load_formations(rows):
    """Build formation ranges from pasted table rows, labelled by formation name."""
    return _load_ranges(rows, FORMATION_NAME)


def find_range(ranges, range_id):
    if range_id is None:
        return None
    for depth_range in ranges or ():
        if depth_range.id == str(range_id):
            return depth_range
    return None


def normalize_filter_mode(filter_mode):
    mode = FILTER_ALIASES.get(str(filter_mode).lower(), str(filter_mode).lower())
    if mode not in FILTER_MODES:
        raise ValueError(f"Unsupported filter mode: {filter_mode}")
    return mode


def filter_depth(records, start_depth, end_depth):
    """Keep rows with ``start_depth <= depth <= end_depth`` (inclusive both ends)."""
    if isinstance(records, RecordSet):
        records = records.records
    df = _frame(records)
    if df.empty:
        return df
    mask = (df[DEPTH] >= start_depth) & (df[DEPTH] <= end_depth)
    return df.loc[mask].reset_index(drop=True)


def active_range(config, sections=None, formations=None):
    """Return the DepthRange the configuration points at, or None."""
    mode = normalize_filter_mode(config.filter_mode)
    if mode == FILTER_SECTION:
        return find_range(sections, config.selected_range_id)
    if mode == FILTER_FORMATION:
        return find_range(formations, config.selected_range_id)
    return None


def select_records(records, config, sections=None, formations=None):
    """Narrow ``records`` to the configured section or formation.

    An unknown or missing range id leaves the records unfiltered.
    """
    if isinstance(records, RecordSet):
        records = records.records
    selected = active_range(config, sections, formations)
    if selected is None:
        if normalize_filter_mode(config.filter_mode) != FILTER_NONE:
            logger.debug("No %s with id %r; records left unfiltered", config.filter_mode, config.selected_range_id)
        return _frame(records)
    return filter_depth(records, selected.start_depth, selected.end_depth)
