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

"""Session containers for a decimation run.

These keep the ingested records, quality metrics, depth ranges and
configuration together, and memoize the decimated output so repeated requests
with unchanged inputs do not recompute.
"""

import hashlib
import logging

import pandas as pd

from . import data, quality, ranges, validate
from .decimation import STRATEGIES, STRATEGY_BIN_COUNT, decimate
from .export import export_points

logger = logging.getLogger(__name__)

DEFAULT_BIN_COUNT = 20


class DecimationConfig:
    def __init__(self, strategy=STRATEGY_BIN_COUNT, interval=DEFAULT_BIN_COUNT, filter_mode=ranges.FILTER_NONE,
                 selected_range_id=None, enable_smoothing=False, outlier_removal=False):
        settings = self._checked({
            "strategy": strategy,
            "interval": interval,
            "filter_mode": filter_mode,
            "selected_range_id": selected_range_id,
            # Accepted and carried through, but no aggregation uses them yet
            "enable_smoothing": enable_smoothing,
            "outlier_removal": outlier_removal,
        })
        for key, val in settings.items():
            setattr(self, key, val)

    @staticmethod
    def _checked(settings):
        if settings["strategy"] not in STRATEGIES:
            raise ValueError(f"Unsupported decimation strategy: {settings['strategy']}")
        return dict(settings, filter_mode=ranges.normalize_filter_mode(settings["filter_mode"]))

    def update(self, **kwargs):
        """Apply new settings; on a rejected value nothing is changed."""
        current = self.to_dict()
        unknown = [key for key in kwargs if key not in current]
        if unknown:
            raise ValueError(f"Unknown decimation setting: {', '.join(unknown)}")
        settings = self._checked({**current, **kwargs})
        for key, val in settings.items():
            setattr(self, key, val)
        return self

    def copy(self):
        return DecimationConfig(**self.to_dict())

    def to_dict(self):
        return {
            "strategy": self.strategy,
            "interval": self.interval,
            "filter_mode": self.filter_mode,
            "selected_range_id": self.selected_range_id,
            "enable_smoothing": self.enable_smoothing,
            "outlier_removal": self.outlier_removal,
        }


def _is_raw_text(source):
    # Paths never span lines; delimited text always has a header line plus rows
    return isinstance(source, bytes) or (isinstance(source, str) and "\n" in source)


def _describe(source):
    if isinstance(source, pd.DataFrame):
        return f"DataFrame[{len(source)} rows]"
    if _is_raw_text(source):
        return f"raw text [{len(source)} chars]"
    return str(source)


def load_drilling_data(source, format_hint=None, fallback=None, **kwargs):
    """Ingest and score ``source``, falling back to placeholder data on failure.

    ``source`` is a file path, raw text or bytes (anything spanning more than
    one line), or a DataFrame of raw records. Any error while
    reading or parsing is logged as a warning and ``fallback`` (a RecordSet, a
    callable returning one, or None for the built-in placeholder series) is
    returned with ``quality.PLACEHOLDER_METRICS``.

    Returns ``(record_set, metrics)``.
    """
    try:
        if isinstance(source, pd.DataFrame):
            record_set = data.normalize_records(source, source_column_map=kwargs.get("source_column_map"))
        elif _is_raw_text(source):
            kwargs.pop("encoding", None)
            record_set = data.ingest(source, format_hint=format_hint or "csv", **kwargs)
        else:
            record_set = data.ingest_file(source, format_hint=format_hint, **kwargs)
    except Exception as exc:
        # The parser collaborator may raise anything; the caller always gets usable data
        logger.warning("Could not ingest %s (%s: %s); using placeholder records",
                       _describe(source), type(exc).__name__, exc)
        if fallback is None:
            record_set = data.placeholder_records()
        elif callable(fallback):
            record_set = fallback()
        else:
            record_set = fallback
        return record_set, dict(quality.PLACEHOLDER_METRICS)

    metrics = quality.score(record_set)
    logger.info("Ingested %d records (%d rows read) from %s; overall quality %d",
                len(record_set), len(record_set.frame), _describe(source), metrics["overall"])
    return record_set, metrics


def _as_ranges(entries, loader):
    if entries is None:
        return []
    if isinstance(entries, pd.DataFrame):
        return loader(entries)
    entries = list(entries)
    if all(isinstance(entry, ranges.DepthRange) for entry in entries):
        return entries
    return loader(entries)


class DrillingSession:
    def __init__(self, record_set=None, metrics=None, sections=None, formations=None, config=None):
        self.record_set = record_set if record_set is not None else data.RecordSet()
        self.metrics = metrics if metrics is not None else quality.score(self.record_set)
        self.sections = _as_ranges(sections, ranges.load_sections)
        self.formations = _as_ranges(formations, ranges.load_formations)
        self.config = config or DecimationConfig()
        self._cache_key = None
        self._cache_points = None

    @classmethod
    def from_source(cls, source, format_hint=None, fallback=None, config=None, **kwargs):
        record_set, metrics = load_drilling_data(source, format_hint=format_hint, fallback=fallback, **kwargs)
        return cls(record_set=record_set, metrics=metrics, config=config)

    @property
    def records(self):
        return self.record_set.records

    def set_ranges(self, sections=None, formations=None):
        if sections is not None:
            self.sections = _as_ranges(sections, ranges.load_sections)
        if formations is not None:
            self.formations = _as_ranges(formations, ranges.load_formations)
        return self

    def active_range(self):
        return ranges.active_range(self.config, self.sections, self.formations)

    def filtered_records(self):
        return ranges.select_records(self.records, self.config, self.sections, self.formations)

    def decimation_key(self):
        """Digest of everything the decimated output depends on."""
        digest = hashlib.sha256()
        records = self.records
        digest.update(repr(list(records.columns)).encode("utf-8"))
        digest.update(pd.util.hash_pandas_object(records, index=True).to_numpy().tobytes())
        digest.update(repr(sorted(self.config.to_dict().items())).encode("utf-8"))
        selected = self.active_range()
        digest.update(repr(selected.to_dict() if selected is not None else None).encode("utf-8"))
        return digest.hexdigest()

    def decimated(self):
        """Decimated points for the current records, configuration and range."""
        key = self.decimation_key()
        if key != self._cache_key:
            self._cache_points = decimate(self.filtered_records(), self.config)
            self._cache_key = key
        return self._cache_points.copy()

    def export(self, path=None):
        return export_points(self.decimated(), path=path)

    def audit(self):
        return {
            "records": validate.validate_records(self.record_set),
            "missing_columns": validate.report_missing_columns(self.record_set),
            "sections": validate.validate_ranges(self.sections, label="section"),
            "formations": validate.validate_ranges(self.formations, label="formation"),
        }

    def to_dict(self):
        return {
            "records": self.records,
            "metrics": self.metrics,
            "sections": [r.to_dict() for r in self.sections],
            "formations": [r.to_dict() for r in self.formations],
            "config": self.config.to_dict(),
            "is_placeholder": self.record_set.is_placeholder,
        }
