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

"""Data loading and record normalization helpers for drilling sensor datasets.

Supports delimited text directly and hands any other format to a
caller-supplied parser, then applies column standardization towards the
drillcraft open data model, so downstream functions can expect consistent keys.
"""

import io
import logging
import re
import warnings
from pathlib import Path

import numpy as np
import pandas as pd

from drillcraft.datamodel import (
    CANONICAL_FIELDS,
    DEPTH,
    PUMP_OUTPUT,
    ROP,
    RPM,
    WOB,
)

logger = logging.getLogger(__name__)


# Minimum expected columns for a drilling record.
# Every retained record carries these as floats; anything else in the source is passed through untouched.
DRILLCRAFT_DATA_MODEL_DRILLING_RECORD = {
    # Measured depth of the bit, in feet. Records without a positive depth are dropped.
    DEPTH: float,
    # Weight on bit, in klbs
    WOB: float,
    # Rotary speed of the drill string, in revolutions per minute
    RPM: float,
    # Rate of penetration, in ft/hr
    ROP: float,
}

# This column map is used to make a 'best guess' for mapping common variations in source column names to the drillcraft data model.
# Source names are lowercased and every run of non-alphanumeric characters becomes a single space before matching,
# so "Rate_of_Penetration (ft/hr)" matches "rate of penetration".
# A variation matches when it equals the normalized name or appears in it as whole words.
# Fields are resolved in the order listed here; the first unclaimed source column that matches wins.
DEFAULT_COLUMN_MAP = {
    DEPTH: ["depth", "bit depth", "hole depth", "measured depth", "md", "dept", "dmea"],
    WOB: ["wob", "weight on bit", "bit weight", "swob"],
    RPM: ["rpm", "rotary speed", "rotary rpm", "surface rpm", "rotation"],
    ROP: ["rop", "rate of penetration", "penetration rate"],
    # Combined pump output is audited for completeness but kept as raw text
    PUMP_OUTPUT: ["pump output", "total pump output", "pump rate", "flow in", "flow rate", "tfo", "gpm"],
}

DELIMITED_FORMATS = {"csv": ",", "txt": ",", "tsv": "\t"}

_NON_ALNUM = re.compile(r"[^0-9a-z]+")


def _normalize_name(name):
    return _NON_ALNUM.sub(" ", str(name).lower()).strip()


def _frame(df):
    if df is None:
        return pd.DataFrame()
    if isinstance(df, pd.DataFrame):
        return df.copy()
    if isinstance(df, dict):
        return pd.DataFrame(df)
    return pd.DataFrame(list(df))


def empty_records():
    """Return a canonical record frame with no rows."""
    return pd.DataFrame({field: pd.Series(dtype=float) for field in CANONICAL_FIELDS})


def _matches(name, variations):
    padded = f" {name} "
    return any(f" {variation} " in padded for variation in variations)


def resolve_columns(columns, column_map=None, source_column_map=None):
    """Map source column names to data model fields.

    Returns a dict of ``{source_column: field}`` for every source column that
    was claimed. Entries in ``source_column_map`` (source name -> field) are
    applied first and override the best guess.
    """
    column_map = column_map or DEFAULT_COLUMN_MAP
    columns = list(columns)
    normalized = {col: _normalize_name(col) for col in columns}

    resolved = {}
    if source_column_map:
        wanted = {
            _normalize_name(raw_name): str(expected_name).lower().strip()
            for raw_name, expected_name in source_column_map.items()
            if raw_name is not None and expected_name is not None
        }
        for col in columns:
            field = wanted.get(normalized[col])
            if field is not None and field not in resolved.values():
                resolved[col] = field

    for field, variations in column_map.items():
        if field in resolved.values():
            continue
        variations = [_normalize_name(v) for v in variations]
        for col in columns:
            if col in resolved:
                continue
            if _matches(normalized[col], variations):
                resolved[col] = field
                break
    return resolved


def standardize_columns(df, column_map=None, source_column_map=None):
    """Rename matched columns to their data model field names.

    Unmatched columns keep their original names unless that name collides
    with a matched field, in which case the unmatched column is dropped.
    """
    resolved = resolve_columns(df.columns, column_map=column_map, source_column_map=source_column_map)
    targets = set(resolved.values())
    keep = [col for col in df.columns if col in resolved or col not in targets]
    return df[keep].rename(columns=resolved)


def parse_with_default(values, default=0.0):
    """Leniently coerce values to floats.

    Returns ``(numbers, parsed)``: the float series with unparseable, missing or
    non-finite entries replaced by ``default``, and a boolean series that is
    True where the original value parsed.
    """
    series = values if isinstance(values, pd.Series) else pd.Series(values, dtype=object)
    if series.dtype == object:
        series = series.map(lambda v: v.strip() if isinstance(v, str) else v)
    numbers = pd.to_numeric(series, errors="coerce").astype(float)
    parsed = pd.Series(np.isfinite(numbers.to_numpy()), index=series.index)
    return numbers.where(parsed, float(default)), parsed


def _clean_raw(raw):
    raw = _frame(raw)
    if raw.empty:
        return raw
    raw = raw.astype(object).where(raw.notna(), "")
    raw = raw.apply(lambda col: col.map(lambda v: str(v).strip()))
    blank = (raw == "").all(axis=1)
    return raw.loc[~blank].reset_index(drop=True)


class RecordSet:
    """Normalized drilling records together with what ingestion saw.

    ``frame`` holds every non-blank input row after coercion, ``presence``
    marks which audited values were actually supplied, and ``records`` is the
    canonical record set (rows with a positive depth).
    """

    def __init__(self, frame=None, presence=None, source_columns=None, is_placeholder=False):
        self.frame = _frame(frame)
        self.presence = _frame(presence)
        if source_columns is None:
            source_columns = list(self.frame.columns)
        self.source_columns = list(source_columns)
        self.is_placeholder = is_placeholder
        if self.frame.empty or DEPTH not in self.frame.columns:
            self.records = empty_records()
        else:
            self.records = self.frame.loc[self.frame[DEPTH] > 0].reset_index(drop=True)

    def __len__(self):
        return len(self.records)

    def copy(self):
        return RecordSet(
            frame=self.frame.copy(),
            presence=self.presence.copy(),
            source_columns=list(self.source_columns),
            is_placeholder=self.is_placeholder,
        )


def normalize_records(raw, source_column_map=None):
    """Turn raw string records into a :class:`RecordSet`.

    ``raw`` may be a DataFrame or an iterable of mappings. Missing or
    unparseable numeric values become 0.0 and are flagged in ``presence``.
    """
    raw = _clean_raw(raw)
    source_columns = list(raw.columns)
    resolved = resolve_columns(source_columns, source_column_map=source_column_map)
    by_field = {field: col for col, field in resolved.items()}

    frame = pd.DataFrame(index=raw.index)
    presence = pd.DataFrame(index=raw.index)
    for field in CANONICAL_FIELDS:
        src = by_field.get(field)
        if src is None:
            frame[field] = 0.0
            presence[field] = False
            continue
        frame[field], presence[field] = parse_with_default(raw[src])

    src = by_field.get(PUMP_OUTPUT)
    if src is not None:
        frame[PUMP_OUTPUT] = raw[src]
        presence[PUMP_OUTPUT] = raw[src] != ""
    else:
        presence[PUMP_OUTPUT] = False

    for col in source_columns:
        if col in resolved or col in frame.columns:
            continue
        frame[col] = raw[col]

    missing = [field for field in CANONICAL_FIELDS if field not in by_field]
    if missing:
        logger.debug("No source column found for %s; values default to 0.0", ", ".join(missing))

    return RecordSet(frame=frame, presence=presence, source_columns=source_columns)


def read_delimited(raw_text, delimiter=","):
    """Split delimited text into a frame of raw strings.

    The first line is the header. Short rows are padded with empty values and
    long rows are truncated to the header width.
    """
    if isinstance(raw_text, bytes):
        raw_text = raw_text.decode("utf-8-sig")
    if raw_text is None or not raw_text.strip():
        raise ValueError("Delimited input is empty; a header row is required")

    header = pd.read_csv(io.StringIO(raw_text), sep=delimiter, nrows=0, engine="python")
    width = len(header.columns)
    with warnings.catch_warnings():
        # Long rows are cut to the header width on purpose
        warnings.simplefilter("ignore", pd.errors.ParserWarning)
        df = pd.read_csv(
            io.StringIO(raw_text),
            sep=delimiter,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            index_col=False,
            engine="python",
            on_bad_lines=lambda fields: fields[:width],
        )
    return df.fillna("")


def ingest(raw_text, format_hint="csv", delimiter=None, parser=None, source_column_map=None):
    """Parse raw input into a :class:`RecordSet`.

    Delimited formats (csv, txt, tsv) are split here. Anything else is passed
    to ``parser``, which must return raw records (a DataFrame or an iterable of
    mappings); only column normalization is applied to its output.
    """
    kind = (format_hint or "csv").lower().lstrip(".")
    if kind in DELIMITED_FORMATS:
        raw = read_delimited(raw_text, delimiter=delimiter or DELIMITED_FORMATS[kind])
    elif parser is not None:
        raw = parser(raw_text)
    else:
        raise ValueError(f"Unsupported format without a parser: {format_hint}")
    return normalize_records(raw, source_column_map=source_column_map)


def ingest_file(path, format_hint=None, encoding="utf-8-sig", **kwargs):
    """Read a file from disk and ingest it, inferring the format from the suffix."""
    path = Path(path)
    kind = (format_hint or path.suffix or "csv").lower().lstrip(".")
    if kind in DELIMITED_FORMATS:
        raw = path.read_text(encoding=encoding)
    else:
        raw = path.read_bytes()
    logger.debug("Read %s as %s", path.name, kind)
    return ingest(raw, format_hint=kind, **kwargs)


def placeholder_records(n=500, seed=0):
    """Deterministic synthetic drilling series used when ingestion fails.

    Depth starts at 1000 ft with a 2 ft step; WOB, RPM and ROP follow slow
    sinusoids with seeded uniform noise.
    """
    rng = np.random.default_rng(seed)
    i = np.arange(n)
    frame = pd.DataFrame({
        DEPTH: 1000.0 + i * 2.0,
        WOB: 15 + np.sin(i * 0.02) * 8 + rng.random(n) * 3,
        RPM: 120 + np.cos(i * 0.015) * 30 + rng.random(n) * 10,
        ROP: 12 + np.sin(i * 0.01) * 6 + rng.random(n) * 4,
    })
    presence = pd.DataFrame(True, index=frame.index, columns=list(CANONICAL_FIELDS))
    return RecordSet(frame=frame, presence=presence, source_columns=list(CANONICAL_FIELDS), is_placeholder=True)


def coerce_numeric(df, columns):
    out = df.copy()
    for col in columns:
        if col in out.columns:
            out[col], _ = parse_with_default(out[col])
    return out


def canonical_frame(records):
    """Return just the canonical numeric columns of ``records`` as floats.

    Accepts a RecordSet or DataFrame; absent fields are filled with 0.0.
    """
    if isinstance(records, RecordSet):
        records = records.records
    df = _frame(records)
    if df.empty:
        return empty_records()
    for field in CANONICAL_FIELDS:
        if field not in df.columns:
            df[field] = 0.0
    return coerce_numeric(df[list(CANONICAL_FIELDS)], CANONICAL_FIELDS).reset_index(drop=True)
