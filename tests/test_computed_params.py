# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Tests for the strong-motion parameters.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import numpy as np
import pytest
from smproc.smp_computed_params import ComputedParams, housner_intensity
from smproc.smp_spectra_resources import get_t_periods


@pytest.fixture
def sine_params():
    dt = 0.01
    time = np.arange(1000) * dt
    acc = 100. * np.sin(2. * np.pi * time)
    params = ComputedParams(acc, dt, 5.)
    assert params.calculate()
    return params


def test_bracketed_duration(sine_params):
    assert sine_params.bracketed_duration == pytest.approx(9.8, abs=0.1)
    assert sine_params.brack_start < sine_params.brack_end


def test_arias_intensity(sine_params):
    assert sine_params.arias_intensity == pytest.approx(0.801, rel=1e-2)


def test_duration_interval(sine_params):
    assert sine_params.duration_interval == pytest.approx(9.0, abs=0.2)
    assert 0. < sine_params.dur_start < sine_params.dur_end


def test_rms_acceleration(sine_params):
    assert 0.6 < sine_params.rms_acceleration < 0.8


def test_cumulative_abs_velocity(sine_params):
    assert sine_params.cav == pytest.approx(6.366, rel=1e-2)


def test_weak_motion():
    dt = 0.01
    time = np.arange(1000) * dt
    params = ComputedParams(np.sin(2. * np.pi * time), dt, 5.)
    assert not params.calculate()
    assert params.bracketed_duration == 0.
    assert params.arias_intensity == 0.


def test_housner_intensity():
    periods = get_t_periods()
    assert housner_intensity(np.ones(len(periods)), periods) == \
        pytest.approx(2.4)
