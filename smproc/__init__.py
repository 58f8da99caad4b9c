# SPDX-License-Identifier: CECILL-2.1
"""
Init file for smproc.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
__version__ = '0.1.0'

__banner__ = '''
  ____  _ __ ___  _ __  _ __ ___   ___
 / __|| '_ ` _ \\| '_ \\| '__/ _ \\ / __|
 \\__ \\| | | | | | |_) | | | (_) | (__
 |___/|_| |_| |_| .__/|_|  \\___/ \\___|
                |_|
'''
