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

"""Decimation of dense drilling records into summary points.

Two strategies are available and selected by name:

``depth_interval``
    Records are sorted by depth and binned into fixed-width depth windows.
    Each occupied window yields one point at its centre carrying the per-field
    median of WOB, RPM and ROP.

``bin_count``
    Records are split, in their existing order, into a target number of
    contiguous chunks. Each chunk yields one point carrying the mean of every
    field, depth included.

A non-positive or non-numeric interval, an interval too small to bin the
depth span, or an empty record set, gives an empty points frame instead of an
error.
"""

import logging
import math

import numpy as np
import pandas as pd

from drillcraft.datamodel import CANONICAL_FIELDS, DEPTH, ROP, RPM, WOB
from drillcraft.drill.data import canonical_frame, empty_records

logger = logging.getLogger(__name__)

STRATEGY_DEPTH_INTERVAL = "depth_interval"
STRATEGY_BIN_COUNT = "bin_count"

_MAX_BINS = 2 ** 62


def _positive(value):
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    if not np.isfinite(value) or value <= 0:
        return None
    return value


def depth_bins(depths, depth_interval):
    """Return ``(min_depth, bin_index)`` for sorted ``depths``.

    Bins are ``[b, b + depth_interval)`` walking from ``floor(first)`` towards
    ``ceil(last)``. A depth equal to ``ceil(last)`` lands in the final bin, and a
    zero-width span is treated as a single bin.

    Returns ``(min_depth, None)`` when the interval is too small for the bin
    count to fit in an integer.
    """
    min_depth = math.floor(depths[0])
    max_depth = math.ceil(depths[-1])
    span_bins = (max_depth - min_depth) / depth_interval
    if not np.isfinite(span_bins) or span_bins >= _MAX_BINS:
        return min_depth, None
    n_bins = max(1, math.ceil(span_bins))
    bin_index = np.floor((depths - min_depth) / depth_interval).astype(np.int64)
    return min_depth, np.clip(bin_index, 0, n_bins - 1)


def decimate_depth_interval(records, depth_interval):
    """Median of WOB/RPM/ROP per depth interval, reported at the bin centre."""
    interval = _positive(depth_interval)
    if interval is None:
        logger.debug("Depth interval %r is not positive; no decimated output", depth_interval)
        return empty_records()
    df = canonical_frame(records)
    if df.empty:
        return empty_records()

    ordered = df.sort_values(DEPTH, kind="mergesort").reset_index(drop=True)
    min_depth, bin_index = depth_bins(ordered[DEPTH].to_numpy(dtype=float), interval)
    if bin_index is None:
        logger.debug("Depth interval %r is too small for the depth span; no decimated output", depth_interval)
        return empty_records()
    medians = ordered[[WOB, RPM, ROP]].groupby(bin_index, sort=True).median()

    points = pd.DataFrame({
        DEPTH: min_depth + medians.index.to_numpy(dtype=float) * interval + interval / 2,
        WOB: medians[WOB].to_numpy(),
        RPM: medians[RPM].to_numpy(),
        ROP: medians[ROP].to_numpy(),
    })
    return points


def decimate_bin_count(records, bin_count):
    """Mean of every field over contiguous chunks, keeping the input row order."""
    count = _positive(bin_count)
    if count is None:
        logger.debug("Bin count %r is not positive; no decimated output", bin_count)
        return empty_records()
    df = canonical_frame(records)
    if df.empty:
        return empty_records()

    bin_size = math.ceil(len(df) / count)
    chunk = np.arange(len(df)) // bin_size
    means = df.groupby(chunk, sort=True).mean()
    return means[list(CANONICAL_FIELDS)].reset_index(drop=True)


STRATEGIES = {
    STRATEGY_DEPTH_INTERVAL: decimate_depth_interval,
    STRATEGY_BIN_COUNT: decimate_bin_count,
}


def decimate(records, config):
    """Decimate ``records`` with the strategy and interval named in ``config``."""
    strategy = STRATEGIES.get(config.strategy)
    if strategy is None:
        raise ValueError(f"Unsupported decimation strategy: {config.strategy}")
    points = strategy(records, config.interval)
    logger.debug("Decimated to %d points using %s=%r", len(points), config.strategy, config.interval)
    return points
