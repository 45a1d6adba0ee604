# Copyright (C) 2026 Darkmine Pty Ltd
# SPDX-License-Identifier: GPL-3.0-or-later

from . import data, decimation, export, model, quality, ranges, validate

__all__ = [
	"data",
	"decimation",
	"export",
	"model",
	"quality",
	"ranges",
	"validate",
]
