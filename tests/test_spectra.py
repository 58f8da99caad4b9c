# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Tests for the response spectra coefficients and the V3 processing.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import math
import numpy as np
import pytest
from numpy.testing import assert_allclose
from obspy import Trace
from smproc.smp_constants import DELTA_T, NUM_T_PERIODS, V3_DAMPING_VALUES
from smproc.smp_errors import SmProcessingError
from smproc.smp_spectra_resources import (
    get_coef_array, get_t_periods, oscillator_coefficients)
from smproc.smp_trace import init_smproc_header
from smproc.smp_v3_process import (
    V3Process, fas_at_periods, oscillator_displacement)


def test_periods():
    periods = get_t_periods()
    assert len(periods) == NUM_T_PERIODS
    assert periods[15] == pytest.approx(0.1)
    assert np.all(np.diff(periods) > 0)
    with pytest.raises(ValueError):
        periods[0] = 1.


def test_coef_array():
    table = get_coef_array(200., 0.05)
    assert table.shape == (NUM_T_PERIODS, 6)
    assert not table.flags.writeable
    assert get_coef_array(200., 0.05) is table
    # unsupported values fall back to the first rate and damping
    assert_allclose(get_coef_array(33., 0.3), get_coef_array(50., 0.))


@pytest.mark.parametrize('period, damping', [(0.1, 0.05), (2., 0.2)])
def test_transition_determinant(period, damping):
    dt = 0.005
    coef_a, coef_b, coef_c, coef_d = oscillator_coefficients(
        period, damping, dt)[:4]
    omega = 2. * math.pi / period
    assert coef_a * coef_d - coef_b * coef_c == \
        pytest.approx(math.exp(-2. * damping * omega * dt))


def test_oscillator_displacement():
    rng = np.random.default_rng(1)
    acc = rng.standard_normal(500)
    coefs = oscillator_coefficients(0.5, 0.05, 0.01)
    coef_a, coef_b, coef_c, coef_d, coef_e, coef_f = coefs
    disp = np.zeros(len(acc))
    veloc = np.zeros(len(acc))
    for k in range(1, len(acc)):
        disp[k] = coef_a * disp[k-1] + coef_b * veloc[k-1] + coef_e * acc[k]
        veloc[k] = coef_c * disp[k-1] + coef_d * veloc[k-1] + coef_f * acc[k]
    assert_allclose(oscillator_displacement(acc, coefs), disp, atol=1e-12)


def test_fas_at_periods():
    delta_f = 0.1
    spectrum = np.arange(1001) * delta_f
    periods = get_t_periods()
    assert_allclose(
        fas_at_periods(spectrum, delta_f, periods), 1. / periods, rtol=1e-6)


def _v2_trace(npts=4000, delta=0.005, freq=2.):
    time = np.arange(npts) * delta
    data = 100. * np.sin(2. * np.pi * freq * time)
    trace = Trace(
        data=data,
        header={'network': 'CE', 'station': '12345', 'channel': 'HNZ',
                'delta': delta})
    init_smproc_header(trace)
    return trace


def test_v3_process():
    trace = _v2_trace()
    v3process = V3Process(trace, trace.data, {}, strong_motion=True)
    v3process.process()
    assert v3process.peak_period == pytest.approx(0.5)
    assert v3process.peak_time == pytest.approx(2.)
    assert v3process.peak_val > 100.
    assert v3process.housner_intensity > 0.
    assert v3process.sa_table.shape == (4, 2)
    assert sorted(v3process.sa_values) == [0.2, 0.3, 1.0, 3.0]
    arrays = v3process.get_v3_arrays()
    assert len(arrays) == 2 + 3 * len(V3_DAMPING_VALUES)
    assert all(len(array) == NUM_T_PERIODS for array in arrays)
    sd, sv, sa = v3process.spectra[0.05]
    omega = 2. * np.pi / get_t_periods()
    assert_allclose(sa, sd * omega**2)
    assert np.argmax(v3process.fas) == np.argmin(
        np.abs(get_t_periods() - 0.5))


def test_v3_full_spectra():
    trace = _v2_trace()
    v3process = V3Process(trace, trace.data, {'full_acc_spectra': True})
    v3process.process()
    assert v3process.housner_intensity == 0.
    assert v3process.sa_table.shape == (NUM_T_PERIODS, 2)
    assert_allclose(v3process.sa_table[:, 0], get_t_periods())


def test_v3_invalid_delta_t():
    trace = _v2_trace()
    trace.stats.smproc.real_header[DELTA_T] = -999.
    with pytest.raises(SmProcessingError):
        V3Process(trace, trace.data, {})
