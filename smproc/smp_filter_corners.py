# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Station filter corner table.

The table is a text file with one station per line::

    # SNCL: low corner, high corner
    CE.12345.HNZ.--: 0.1, 35.0

Blank lines and lines starting with ``#`` are ignored.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import logging
logger = logging.getLogger(__name__.rsplit('.', maxsplit=1)[-1])


class FilterCornerTable(dict):
    """Band-pass corners by station id, as ``(low, high)`` tuples."""

    def set_corners(self, key, low, high):
        """
        Store the corners for a station.

        :return: False if the key is empty or the corners are not positive
            and increasing
        :rtype: bool
        """
        if not key or low <= 0 or high <= 0 or low >= high:
            return False
        self[key] = (low, high)
        return True

    def parse_line(self, line):
        """Parse a table line and store its corners."""
        line = line.strip()
        if not line or line.startswith('#'):
            return
        try:
            key, values = line.split(':', maxsplit=1)
            low, high = values.split(',')[:2]
            low = float(low)
            high = float(high)
        except ValueError:
            logger.warning(f'Unable to convert text to number in "{line}"')
            return
        if not self.set_corners(key.strip(), low, high):
            logger.warning(f'Invalid filter corners in "{line}"')

    def read(self, filename):
        """
        Read a filter corner table file.

        :param filename: path to the table
        :type filename: str
        """
        logger.info(f'Reading station filter corner table: {filename}')
        with open(filename, encoding='utf-8') as fp:
            for line in fp:
                self.parse_line(line)
        logger.info(f'Filter corner table read complete: {len(self)} entries')


def load_filter_corner_table(config):
    """
    Read the station filter corner table named in the configuration.

    :param config: processing configuration
    :type config: :class:`~smproc.config.Config`
    :return: the table, or None if no table is configured
    :rtype: :class:`FilterCornerTable`
    """
    filename = config.get('station_filter_table')
    if not filename:
        return None
    table = FilterCornerTable()
    table.read(filename)
    return table
