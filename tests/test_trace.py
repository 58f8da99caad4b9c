# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Tests for the trace header helpers.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import numpy as np
import pytest
from obspy import Trace
from smproc.smp_constants import DELTA_T, DEFAULT_NOREALVAL, REAL_HEADER_LENGTH
from smproc.smp_errors import SmFormatError
from smproc.smp_trace import (
    get_smproc_header, init_smproc_header, make_trace, sncl_code)


def _trace(location=''):
    return Trace(
        data=np.zeros(10),
        header={'network': 'CE', 'station': '12345', 'location': location,
                'channel': 'HNZ', 'delta': 0.01})


def test_header_creation():
    trace = _trace()
    header = get_smproc_header(trace)
    assert header.no_real_value == DEFAULT_NOREALVAL
    assert header.real_header[DELTA_T] == 10.
    assert header.real_header[0] == DEFAULT_NOREALVAL
    assert len(header.processing_log) == 0
    assert get_smproc_header(trace) is header


def test_sncl_code():
    assert sncl_code(_trace()) == 'CE.12345.HNZ.--'
    assert sncl_code(_trace('01')) == 'CE.12345.HNZ.01'


def test_make_trace_copies_header():
    trace = init_smproc_header(_trace())
    new_trace = make_trace(trace, np.ones(5), units='cm')
    new_trace.stats.smproc.real_header[0] = 1.
    assert trace.stats.smproc.real_header[0] == DEFAULT_NOREALVAL
    assert new_trace.stats.smproc.units == 'cm'
    assert 'units' not in trace.stats.smproc
    assert new_trace.stats.npts == 5
    assert new_trace.id == trace.id


def test_short_real_header():
    with pytest.raises(SmFormatError, match='real header has 10 values'):
        init_smproc_header(_trace(), real_header=np.zeros(10))
    header = init_smproc_header(
        _trace(), real_header=np.ones(REAL_HEADER_LENGTH)).stats.smproc
    assert header.real_header[DELTA_T] == 1.
