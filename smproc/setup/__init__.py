# -*- coding: utf8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Runtime setup for smproc

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
from .logging import setup_logging  # noqa
