# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Tests for trend removal, filtering and adaptive baseline correction.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import numpy as np
import pytest
from numpy.testing import assert_allclose
from smproc.smp_baseline import (
    ABC, FilterAndIntegrateProcess, TrendRemovalProcess)
from smproc.smp_constants import V2Status
from smproc.smp_errors import SmProcessingError
from conftest import synthetic_record


def test_trend_removal_constant():
    accel = 0.2 * np.ones(1000)
    detrend = TrendRemovalProcess(100, False)
    velocity = detrend.remove_trends(accel, 0.01)
    assert detrend.pre_event_mean == pytest.approx(0.2)
    assert detrend.trend_removal_order == 0
    assert_allclose(accel, 0., atol=1e-10)
    assert len(velocity) == 1000
    assert_allclose(velocity, 0., atol=1e-10)


def test_trend_removal_linear_drift():
    dt = 0.01
    time = np.arange(2000) * dt
    accel = 0.05 + 0.01 * np.sin(2 * np.pi * time)
    detrend = TrendRemovalProcess(0, False)
    velocity = detrend.remove_trends(accel, dt)
    # the constant offset integrates to a line in velocity
    assert abs(velocity[-1]) < 0.05


def test_filter_and_integrate():
    dt = 0.005
    accel = synthetic_record()
    filterint = FilterAndIntegrateProcess(0.1, 40., 2, 2., 2000, True)
    filterint.filter_and_integrate(accel, dt)
    assert len(filterint.velocity) == len(accel)
    assert len(filterint.displacement) == len(accel)
    assert len(filterint.padded_accel) > len(accel)
    assert filterint.initial_vel == filterint.velocity[0]
    assert filterint.config_taper == pytest.approx(4.)


def test_filter_and_integrate_invalid_corners():
    filterint = FilterAndIntegrateProcess(0., 10., 2, 2., 100, True)
    with pytest.raises(SmProcessingError):
        filterint.filter_and_integrate(np.ones(1000), 0.01)


def test_spline_smooth_line():
    dt = 0.01
    line = 2. + 0.5 * np.arange(100) * dt
    vals = line.copy()
    vals[21:60] = 0.
    ABC.get_spline_smooth(vals, 20, 60, dt)
    assert_allclose(vals, line, atol=1e-8)


@pytest.mark.parametrize('break2', [97, 99])
def test_spline_smooth_short_tail(break2):
    # fewer than five samples after the second break: straight line join
    dt = 0.01
    line = 2. + 0.5 * np.arange(100) * dt
    vals = line.copy()
    vals[21:break2] = 0.
    assert not ABC.get_spline_smooth(vals, 20, break2, dt)
    assert_allclose(vals, line, atol=1e-12)


@pytest.mark.parametrize('config', [
    {'abc_first_poly_order_lower': 0},
    {'abc_third_poly_order_upper': 5},
    {'abc_first_poly_order_lower': 2, 'abc_first_poly_order_upper': 1},
    {'abc_third_poly_order_lower': 'abc'},
])
def test_abc_invalid_orders(config):
    with pytest.raises(SmProcessingError):
        ABC(0.01, np.zeros(100), np.zeros(100), 0.1, 20., 2, 50, 2., config)


def test_abc_early_onset():
    abc = ABC(0.005, np.zeros(8000), np.zeros(8000), 0.1, 40., 2, 2, 2.)
    assert abc.find_fit() == V2Status.NOABC


def test_abc_fit():
    dt = 0.005
    accel = synthetic_record()
    # baseline step after the event
    accel[4000:] += 0.05
    detrend = TrendRemovalProcess(2000, False)
    velocity = detrend.remove_trends(accel, dt)
    abc = ABC(dt, velocity, accel, 0.1, 40., 2, 2000, 2.)
    status = abc.find_fit()
    assert status in (V2Status.GOOD, V2Status.FAILQC)
    assert abc.params
    assert all(len(run) == 14 for run in abc.params)
    assert len(abc.accel) == len(accel)
    assert len(abc.velocity) == len(accel)
    assert len(abc.displacement) == len(accel)
    assert abc.best_first_degree in (1, 2)
    ranked = [abc.params[idx][0] for idx in abc.ranking]
    assert ranked == sorted(ranked)
