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

"""CSV export of decimated points.

The header, column order, delimiter and precision are relied on by
downstream tools and must not change.
"""

import logging
from pathlib import Path

import pandas as pd

from drillcraft.datamodel import DEPTH, ROP, RPM, WOB
from drillcraft.drill.data import canonical_frame

logger = logging.getLogger(__name__)

# field -> (header, format)
EXPORT_COLUMNS = {
    DEPTH: ("Depth", "{:.1f}"),
    WOB: ("WOB", "{:.2f}"),
    RPM: ("RPM", "{:.1f}"),
    ROP: ("ROP", "{:.2f}"),
}


def format_points(points):
    """Return the points as a frame of formatted strings under the export headers."""
    df = canonical_frame(points)
    return pd.DataFrame({
        header: df[field].map(fmt.format) for field, (header, fmt) in EXPORT_COLUMNS.items()
    }, columns=[header for header, _ in EXPORT_COLUMNS.values()])


def export_points(points, path=None):
    """Serialize decimated points to CSV text, optionally writing it to ``path``."""
    text = format_points(points).to_csv(index=False, lineterminator="\n")
    if path is not None:
        path = Path(path)
        path.write_text(text, encoding="utf-8")
        logger.info("Exported %d decimated points to %s", len(points), path)
    return text
