# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Exceptions for smproc.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""


class SmException(RuntimeError):
    """Base exception: the current channel cannot be processed."""


class SmFormatError(SmException):
    """Malformed header or data coming from the record format layer."""


class SmProcessingError(SmException):
    """Invalid calibration, configuration or filter parameters."""
