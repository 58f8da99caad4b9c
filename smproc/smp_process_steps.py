# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Processing log: the ordered list of processing steps applied to a record.

The log is immutable: every ``add_*`` method returns a new log with the
record appended.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
from .smp_constants import BaselineType

TIME_FORMAT = '9.4f'


class ProcessingLog(tuple):
    """Immutable sequence of processing log records."""

    def __new__(cls, records=()):
        return super().__new__(cls, records)

    def __repr__(self):
        return f'ProcessingLog({tuple(self)!r})'

    def add(self, record):
        """Return a new log with ``record`` appended."""
        return ProcessingLog(tuple(self) + (record,))

    def __add__(self, other):
        return ProcessingLog(tuple(self) + tuple(other))

    def add_correction_type(self, version):
        """Automatic processing, with the processing software version."""
        return self.add(
            f'|<PROCESS> Automatically processed using smproc version '
            f'{version}')

    def add_event_onset(self, onset_time):
        """Event onset time (s)."""
        return self.add(
            f'|<EONSET> event onset(sec)={onset_time:{TIME_FORMAT}}')

    def add_resampling(self, new_rate):
        """New sampling rate after resampling."""
        return self.add(
            f'|<RESAMPLE> Data resampled to {new_rate:6.2f} samples/sec')

    def add_decimation(self, orig_rate):
        """Sampling rate after decimation."""
        return self.add(
            f'|<DECIMATE> Data decimated to {orig_rate:6.2f} samples/sec')

    def add_spike_count(self, spikes):
        """Number of spikes removed in V1."""
        return self.add(
            f'|<DESPIKE> {spikes} spike(s) removed during V1 processing')

    def add_baseline_step(self, fstart, fstop, astart, astop, datatype,
                          btype, order, step=0):
        """
        Baseline correction step.

        :param fstart: start time of the function interval (s)
        :param fstop: end time of the function interval (s)
        :param astart: start time of the application interval (s)
        :param astop: end time of the application interval (s)
        :param datatype: V2 product the correction applies to
        :type datatype: :class:`~smproc.smp_constants.V2DataType`
        :param btype: baseline correction method
        :type btype: :class:`~smproc.smp_constants.BaselineType`
        :param order: order of the correction function
        :type order: :class:`~smproc.smp_constants.CorrectionOrder`
        :param step: segment number, for adaptive baseline correction
        :type step: int
        """
        dtype = datatype.value[0]
        if btype == BaselineType.ABC:
            tag = f'{dtype}BLABC{step}'
        else:
            tag = f'{dtype}BLC'
        return self.add(
            f'|<{tag}>SF:{fstart:{TIME_FORMAT}}, EF:{fstop:{TIME_FORMAT}}, '
            f'SA:{astart:{TIME_FORMAT}}, EA:{astop:{TIME_FORMAT}}, '
            f'ORDER:{order.name}')

    def update_comments(self, comments):
        """
        Append the log to a comment block.

        The first line of a comment block starts with the number of
        comment lines which follow it, in a 4-character field.

        :param comments: comment block, whose first line is the header
        :type comments: list of str
        :return: the new comment block
        :rtype: list of str
        """
        text = list(comments) + list(self)
        first = text[0]
        text[0] = f'{len(text) - 1:4d}{first[4:]}'
        return text
