# -*- coding: utf8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Configuration classes and functions for smproc

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
from .config import Config  # noqa
from .configobj_helpers import write_sample_config  # noqa
