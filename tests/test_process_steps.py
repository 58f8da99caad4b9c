# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Tests for the processing log.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
from smproc.smp_constants import (
    BaselineType, CorrectionOrder, V2DataType)
from smproc.smp_process_steps import ProcessingLog


def test_log_is_immutable():
    log = ProcessingLog()
    new_log = log.add_event_onset(10.)
    assert len(log) == 0
    assert new_log == ('|<EONSET> event onset(sec)=  10.0000',)
    assert isinstance(new_log + log, ProcessingLog)


def test_log_records():
    log = ProcessingLog().add_resampling(200.).add_decimation(100.)
    log = log.add_spike_count(3)
    assert list(log) == [
        '|<RESAMPLE> Data resampled to 200.00 samples/sec',
        '|<DECIMATE> Data decimated to 100.00 samples/sec',
        '|<DESPIKE> 3 spike(s) removed during V1 processing',
    ]


def test_correction_type():
    log = ProcessingLog().add_correction_type('1.2.3')
    assert log[0].startswith('|<PROCESS> Automatically processed')
    assert log[0].endswith('1.2.3')


def test_baseline_steps():
    log = ProcessingLog().add_baseline_step(
        0., 1.5, 0., 30., V2DataType.ACC, BaselineType.BESTFIT,
        CorrectionOrder.MEAN)
    assert log[0] == (
        '|<ABLC>SF:   0.0000, EF:   1.5000, SA:   0.0000, EA:  30.0000, '
        'ORDER:MEAN')
    log = log.add_baseline_step(
        1.5, 12., 1.5, 12., V2DataType.VEL, BaselineType.ABC,
        CorrectionOrder.SPLINE, 2)
    assert log[1].startswith('|<VBLABC2>SF:   1.5000')
    assert log[1].endswith('ORDER:SPLINE')


def test_update_comments():
    log = ProcessingLog(('| a', '| b'))
    comments = log.update_comments(['   2|header', '| c', '| d'])
    assert comments[0] == '   4|header'
    assert comments[1:] == ['| c', '| d', '| a', '| b']
