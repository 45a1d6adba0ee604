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

"""
Drillcraft Open Data Model

Provides a consistent schema for drilling sensor data throughout the library.

The ingestor applies a common column mapping, but also accepts user-provided column maps to handle variations in source data.
"""

DEPTH = "depth"
WOB = "wob"
RPM = "rpm"
ROP = "rop"
TIMESTAMP = "timestamp"
PUMP_OUTPUT = "pump_output"

RANGE_ID = "id"
START_DEPTH = "start_depth"
END_DEPTH = "end_depth"
LABEL = "label"
HOLE_DIAMETER = "hole_diameter"
FORMATION_NAME = "formation_name"

# Order matters: decimated points and exports always follow it
CANONICAL_FIELDS = (DEPTH, WOB, RPM, ROP)
