# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Tests for the numeric primitives.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal
from smproc import smp_array_ops as ops
from smproc.smp_constants import MIN_VALUE, MAX_VALUE


def test_remove_value():
    array = np.array([1., 2., 3.])
    assert ops.remove_value(array, 1.)
    assert_array_equal(array, [0., 1., 2.])
    assert not ops.remove_value(np.zeros(0), 1.)


def test_make_time_and_freq_arrays():
    assert_allclose(ops.make_time_array(0.01, 4), [0., 0.01, 0.02, 0.03])
    assert_allclose(ops.make_freq_array(0.1, 4), [2.5, 5.0])
    assert len(ops.make_time_array(0., 4)) == 0
    assert len(ops.make_freq_array(0.01, 0)) == 0


def test_remove_linear_trend_ramp():
    ramp = np.arange(100) * 0.5 + 3.
    assert ops.remove_linear_trend(ramp, 0.01)
    assert_allclose(ramp, 0., atol=1e-10)


def test_remove_linear_trend_sine():
    idx = np.arange(1000)
    array = np.sin(idx) + 0.1 * idx
    ops.remove_linear_trend(array, 1.0)
    # the sine has a small residual trend of its own
    assert_allclose(array, np.sin(idx), atol=0.02)
    assert not ops.remove_linear_trend(np.zeros(0), 1.)
    assert not ops.remove_linear_trend(np.ones(5), 0.)


def test_remove_linear_trend_from_sub_array():
    array = np.arange(20, dtype=float)
    ops.remove_linear_trend_from_sub_array(array, array[:10].copy(), 1.)
    assert_allclose(array, 0., atol=1e-10)


@pytest.mark.parametrize('degree', [2, 3])
def test_polynomial_trend_removal(degree):
    dt = 0.01
    time = ops.make_time_array(dt, 500)
    coefs = [0.5, -1.2, 2.0, 0.7][:degree+1]
    array = np.polynomial.polynomial.polyval(time, coefs)
    fitted = ops.find_polynomial_trend(array, degree, dt)
    assert_allclose(fitted, coefs, atol=1e-8)
    assert ops.remove_polynomial_trend(array, fitted, dt)
    assert_allclose(array, 0., atol=1e-8)


def test_polynomial_trend_invalid():
    assert len(ops.find_polynomial_trend(np.ones(10), 0, 0.01)) == 0
    assert len(ops.find_polynomial_trend(np.ones(10), 4, 0.01)) == 0
    assert len(ops.find_polynomial_trend(np.ones(10), 1, 0.)) == 0
    assert len(ops.find_polynomial_trend(np.zeros(0), 1, 0.01)) == 0


def test_root_mean_square():
    assert ops.root_mean_square([1., 1.], [0., 0.]) == pytest.approx(1.)
    assert ops.root_mean_square([1., 1.], [0.]) == -1
    assert ops.root_mean_square([], []) == -1


def test_trend_with_best_fit():
    dt = 0.01
    time = ops.make_time_array(dt, 400)
    parabola = 1. + time - 4. * time**2
    assert ops.remove_trend_with_best_fit(parabola, dt) == 2
    assert_allclose(parabola, 0., atol=1e-8)
    assert ops.remove_trend_with_best_fit(np.zeros(0), dt) == -1
    assert len(ops.find_trend_with_best_fit(parabola, 0.)) == 0


@pytest.mark.parametrize('array', [
    0.2 * np.ones(1000),
    0.5 + 0.3 * np.arange(1000) * 0.01,
])
def test_trend_with_best_fit_exact_line(array):
    # a parabola fitting only rounding errors better does not win
    assert len(ops.find_trend_with_best_fit(array, 0.01)) == 2


def test_integrate():
    result = ops.integrate(np.ones(5), 0.5, 1.)
    assert_allclose(result, [1., 1.5, 2., 2.5, 3.])
    assert len(ops.integrate(np.ones(5), 0., 0.)) == 0
    assert len(ops.integrate(None, 0.1, 0.)) == 0


@pytest.mark.parametrize('order', [3, 5, 7, 9])
def test_differentiate_line(order):
    dt = 0.02
    array = 3. * ops.make_time_array(dt, 50) + 1.
    assert_allclose(ops.differentiate(array, dt, order), 3., rtol=1e-9)


@pytest.mark.parametrize('order', [3, 5, 7, 9])
def test_integrate_then_differentiate(order):
    dt = 0.005
    array = np.sin(2. * np.pi * ops.make_time_array(dt, 2000))
    assert ops.apply_cosine_taper(array, 400, 400)
    velocity = ops.integrate(array, dt, 0.0007705)
    assert velocity[0] == pytest.approx(0.0007705)
    assert_allclose(ops.differentiate(velocity, dt, order), array, atol=1e-3)


def test_differentiate_invalid():
    assert len(ops.differentiate(np.ones(4), 0.01, 5)) == 0
    assert len(ops.differentiate(np.ones(10), 0., 5)) == 0
    assert len(ops.central_diff(np.ones(10), 0.01, 4)) == 0


def test_correct_for_zero_initial_estimate():
    array = np.array([0., 2., 2., 2., -1., -1., -1.])
    ops.correct_for_zero_initial_estimate(array, 6)
    # mean of samples 1 to 2 removed
    assert_allclose(array, [-2., 0., 0., 0., -3., -3., -3.])


def test_find_subset_mean():
    array = np.arange(10, dtype=float)
    assert ops.find_subset_mean(array, 0, 4) == pytest.approx(1.5)
    assert ops.find_subset_mean(array, 5, 3) == MIN_VALUE
    assert ops.find_subset_mean(array, 0, 11) == MIN_VALUE


def test_units_and_mean():
    assert_allclose(ops.counts_to_physical_values([1, 2], 0.5), [0.5, 1.])
    assert_allclose(ops.convert_array_units([1., 2.], 2.), [2., 4.])
    array = np.array([1., 2., 3., 6.])
    assert ops.find_and_remove_mean(array) == pytest.approx(3.)
    assert_allclose(array, [-2., -1., 0., 3.])
    assert ops.find_and_remove_mean(np.zeros(0)) == MIN_VALUE


def test_signal_to_noise_ratio():
    array = np.concatenate((0.1 * np.ones(100), np.ones(100)))
    snr = ops.calc_signal_to_noise_ratio(array, 100)
    assert snr == pytest.approx(10. * np.log10(0.505 / 0.01))
    assert ops.calc_signal_to_noise_ratio(array, 0) == -1
    assert ops.calc_signal_to_noise_ratio(array, 300) == -1
    assert ops.calc_signal_to_noise_ratio(np.zeros(10), 5) == -1


def test_apply_cosine_taper():
    array = np.ones(100)
    assert ops.apply_cosine_taper(array, 10, 10)
    assert array[0] == 0.
    assert array[-1] == 0.
    assert array[50] == 1.
    assert np.all(np.diff(array[:5]) > 0)
    untouched = np.ones(10)
    assert not ops.apply_cosine_taper(untouched, 4, 6)
    assert not ops.apply_cosine_taper(untouched, 1, 1)
    assert not ops.apply_cosine_taper(untouched, 6, 6)
    assert_array_equal(untouched, 1.)


def test_perform_3pt_smoothing():
    array = np.array([0., 0., 4., 0., 0.])
    smooth = ops.perform_3pt_smoothing(array)
    assert_allclose(smooth, [0., 0., 2., 1., 0.])


def test_find_zero_crossing():
    array = np.array([1., 2., -1., -2., 3.])
    assert ops.find_zero_crossing(array, 0, 5) == 1
    assert ops.find_zero_crossing(array, 4, 0) == 3
    assert ops.find_zero_crossing(np.ones(5), 0, 5) == -1
    assert ops.find_zero_crossing(array, 0, 0) == -2
    assert ops.find_zero_crossing(array, -1, 3) == -2


def test_find_standard_dev():
    array = [1., 2., 3., 4.]
    assert ops.find_standard_dev(array) == pytest.approx(np.std(array))
    assert ops.find_standard_dev(array, population=False) == \
        pytest.approx(np.std(array, ddof=1))
    assert ops.find_standard_dev([1.]) == MAX_VALUE


def test_find_closest_freq():
    freqs = np.array([0.5, 1., 1.5, 2.])
    assert ops.find_closest_freq(freqs, 1.4) == 2
    assert ops.find_closest_freq(freqs, -1.) == -1


def test_interpolate():
    result = ops.interpolate([0., 2.], [0., 4.], [0.5, 1.], 1)
    assert_allclose(result, [1., 2.])
    assert len(ops.interpolate([0., 2.], [0., 4.], [0.5, 1.], 2)) == 0
    assert len(ops.interpolate([0., 1., 2.], [0., 4.], [0.5, 1.], 1)) == 0
