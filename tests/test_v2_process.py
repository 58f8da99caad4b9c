# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Tests for the V2 processing.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import numpy as np
import pytest
from smproc.smp_constants import (
    DELTA_T, MOMENT_MAGNITUDE, PEAK_VAL, BaselineType, V2DataType, V2Status)
from smproc.smp_errors import SmProcessingError
from smproc.smp_filter_corners import FilterCornerTable
from smproc.smp_v2_process import V2Process
from conftest import clean_record, make_v1_trace


@pytest.fixture
def aic_config(config):
    config['event_onset_method'] = 'AIC'
    return config


def _process(trace, config, corner_table=None):
    v2process = V2Process(trace, config, corner_table)
    status = v2process.process()
    return v2process, status


def test_v2_products(v1_trace, aic_config):
    v2process, status = _process(v1_trace, aic_config)
    assert status.has_products
    assert status in (V2Status.GOOD, V2Status.FAILQC)
    assert abs(v2process.pick_index - 2000) < 150
    assert v2process.lowcut == pytest.approx(0.1)
    assert v2process.highcut == pytest.approx(40.)
    assert any(
        record.startswith('|<EONSET>')
        for record in v2process.processing_log)
    traces = (v2process.acc, v2process.vel, v2process.dis)
    assert [tr.stats.smproc.units for tr in traces] == [
        'cm/sec2', 'cm/sec', 'cm']
    assert [tr.stats.smproc.data_type for tr in traces] == list(V2DataType)
    for trace in traces:
        assert trace.stats.npts == 8000
        assert trace.stats.smproc.v2_status == status
        assert trace.stats.smproc.real_header[PEAK_VAL] == pytest.approx(
            v2process.get_peak_val(trace.stats.smproc.data_type))
    assert 'initial_velocity' in v2process.acc.stats.smproc
    # the V1 trace is not modified
    assert 'v2_status' not in v1_trace.stats.smproc


@pytest.mark.parametrize('onset_method', ['AIC', 'PWD'])
@pytest.mark.parametrize('integration_method', ['Freq', 'Time'])
def test_v2_good_record(clean_v1_trace, config, onset_method,
                        integration_method):
    config['event_onset_method'] = onset_method
    config['integration_method'] = integration_method
    v2process, status = _process(clean_v1_trace, config)
    assert status == V2Status.GOOD
    assert v2process.basetype == BaselineType.BESTFIT
    assert v2process.qc_vel_initial <= 0.1
    assert v2process.qc_vel_residual <= 0.1
    assert v2process.qc_dis_residual <= 0.1
    baseline_steps = [
        record for record in v2process.processing_log
        if record.startswith('|<ABLC>')]
    assert baseline_steps
    assert not any(
        'BLABC' in record for record in v2process.processing_log)
    assert v2process.strong_motion
    header = v2process.acc.stats.smproc
    assert header.v2_status == V2Status.GOOD
    assert header.baseline_type == BaselineType.BESTFIT
    assert header.strong_motion
    assert header.arias_intensity > 0.


def test_v2_adaptive_correction(clean_v1_trace, config):
    # a baseline step after the pulse makes the velocity drift
    clean_v1_trace.data[4000:] += 0.5
    v2process, status = _process(clean_v1_trace, config)
    assert status in (V2Status.GOOD, V2Status.FAILQC)
    assert v2process.basetype == BaselineType.ABC
    assert v2process.abc_num_runs > 0
    abc_steps = [
        record for record in v2process.processing_log
        if record.startswith('|<ABLABC')]
    assert [record[:10] for record in abc_steps] == [
        '|<ABLABC1>', '|<ABLABC2>', '|<ABLABC3>']
    assert abc_steps[1].endswith('ORDER:SPLINE')
    assert v2process.acc.stats.npts == 8000


@pytest.mark.parametrize('delta_t, message', [
    (1000. / 33., 'out of expected range'),
    (-999., 'is invalid'),
])
def test_v2_invalid_delta_t(v1_trace, aic_config, delta_t, message):
    v1_trace.stats.smproc.real_header[DELTA_T] = delta_t
    with pytest.raises(SmProcessingError, match=message):
        V2Process(v1_trace, aic_config)


def test_v2_invalid_units(v1_trace, aic_config):
    v1_trace.stats.smproc.units_code = 6
    with pytest.raises(SmProcessingError, match='units are unsupported'):
        _process(v1_trace, aic_config)


def test_v2_invalid_magnitude(v1_trace, aic_config):
    v1_trace.stats.smproc.real_header[MOMENT_MAGNITUDE] = -999.
    with pytest.raises(SmProcessingError, match='magnitude'):
        _process(v1_trace, aic_config)


def test_v2_corner_table(v1_trace, aic_config):
    v1_trace.stats.smproc.real_header[MOMENT_MAGNITUDE] = -999.
    table = FilterCornerTable()
    table.set_corners('CE.12345.HNZ.--', 0.2, 30.)
    v2process, status = _process(v1_trace, aic_config, table)
    assert status.has_products
    assert v2process.lowcut == pytest.approx(0.2)
    assert v2process.highcut == pytest.approx(30.)


def test_v2_no_event(v1_trace, config):
    v1_trace.data = np.zeros(8000)
    v2process, status = _process(v1_trace, config)
    assert status == V2Status.NOEVENT
    assert v2process.acc is None


def test_v2_low_snr(v1_trace, aic_config):
    aic_config['signal_to_noise_ratio'] = 1000.
    v2process, status = _process(v1_trace, aic_config)
    assert status == V2Status.FAILINIT
    assert not status.has_products
    assert v2process.acc is None


def test_v2_pga_check(v1_trace, aic_config):
    aic_config['pga_check'] = True
    aic_config['pga_threshold'] = 1000.
    _, status = _process(v1_trace, aic_config)
    assert status == V2Status.FAILINIT


def test_v2_invalid_qc_thresholds(v1_trace, aic_config):
    aic_config['qc_initial_velocity'] = 'abc'
    _, status = _process(v1_trace, aic_config)
    assert status == V2Status.FAILQC


def _trace_100sps():
    return make_v1_trace(clean_record(sample_rate=100.), delta=0.01)


def test_v2_resampling(aic_config):
    v2process, status = _process(_trace_100sps(), aic_config)
    assert v2process.need_resampling
    assert v2process.sample_rate == pytest.approx(200.)
    assert '|<RESAMPLE> Data resampled to 200.00 samples/sec' in \
        v2process.processing_log
    assert status.has_products
    assert v2process.acc.stats.npts == 8000
    assert v2process.acc.stats.delta == pytest.approx(0.005)
    assert v2process.acc.stats.smproc.real_header[DELTA_T] == \
        pytest.approx(5.)


def test_v2_decimation(aic_config):
    aic_config['decimate_resampled_output'] = True
    v2process, status = _process(_trace_100sps(), aic_config)
    assert status.has_products
    assert '|<DECIMATE> Data decimated to 100.00 samples/sec' in \
        v2process.processing_log
    for trace in (v2process.acc, v2process.vel, v2process.dis):
        assert trace.stats.npts == 4000
        assert trace.stats.delta == pytest.approx(0.01)
    assert v2process.acc.stats.smproc.initial_velocity == -999.
