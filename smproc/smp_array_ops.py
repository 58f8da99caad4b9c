# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Numeric primitives on uniformly sampled arrays.

None of these functions raises on bad input: they return a "not computable"
sentinel instead (an empty array, -1, False, ``MIN_VALUE`` or
``MAX_VALUE``), so that the calling process can decide what to do.
Functions documented as "in place" modify their input array, which must
then be a float :class:`numpy.ndarray`.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import math
import numpy as np
from numpy.polynomial import polynomial as P
from .smp_array_stats import ArrayStats
from .smp_constants import MIN_VALUE, MAX_VALUE, OPS_EPSILON

EMPTY = np.zeros(0)


def _is_empty(array):
    return array is None or len(array) == 0


def _bad_dt(dt):
    return abs(dt) < OPS_EPSILON


# TRENDS ----------------------------------------------------------------------
def remove_value(array, value):
    """Subtract a constant from the array, in place."""
    if _is_empty(array):
        return False
    array -= value
    return True


def make_time_array(dt, npts):
    """Return the time values ``i*dt`` for ``npts`` samples."""
    if npts == 0 or _bad_dt(dt):
        return EMPTY.copy()
    return np.arange(npts) * dt


def make_freq_array(dt, npts):
    """Return ``npts//2`` frequencies ``(i+1)/(npts*dt)``."""
    if npts == 0 or _bad_dt(dt):
        return EMPTY.copy()
    return (np.arange(npts // 2) + 1) / (npts * dt)


def find_linear_trend(array, dt):
    """
    Return the least-squares line fitted to the array.

    :param array: input array
    :type array: :class:`numpy.ndarray`
    :param dt: sampling interval (s)
    :type dt: float
    :return: the baseline evaluated at each sample
    :rtype: :class:`numpy.ndarray`
    """
    if _is_empty(array) or _bad_dt(dt):
        return EMPTY.copy()
    time = make_time_array(dt, len(array))
    if len(array) == 1:
        return np.asarray(array, float).copy()
    coefs = P.polyfit(time, array, 1)
    return P.polyval(time, coefs)


def remove_linear_trend(array, dt):
    """Remove the least-squares line from the array, in place."""
    if _is_empty(array) or _bad_dt(dt):
        return False
    array -= find_linear_trend(array, dt)
    return True


def remove_linear_trend_from_sub_array(array, subarray, dt):
    """
    Fit a line to ``subarray`` and remove it from ``array``, in place.

    Both arrays share the same time origin.
    """
    if _is_empty(array) or _is_empty(subarray) or _bad_dt(dt):
        return False
    subtime = make_time_array(dt, len(subarray))
    coefs = P.polyfit(subtime, subarray, 1)
    array -= P.polyval(make_time_array(dt, len(array)), coefs)
    return True


def find_polynomial_trend(array, degree, dt):
    """
    Least-squares polynomial fit over the time base ``i*dt``.

    :param array: input array
    :type array: :class:`numpy.ndarray`
    :param degree: polynomial degree (1 to 3)
    :type degree: int
    :param dt: sampling interval (s)
    :type dt: float
    :return: polynomial coefficients, lowest order first; empty if the
        degree is out of range or the input is invalid
    :rtype: :class:`numpy.ndarray`
    """
    if _is_empty(array) or degree < 1 or degree > 3 or _bad_dt(dt):
        return EMPTY.copy()
    time = make_time_array(dt, len(array))
    return P.polyfit(time, array, degree)


def remove_polynomial_trend(array, coefs, dt):
    """Subtract the polynomial ``coefs`` from the array, in place."""
    if _is_empty(array) or _is_empty(coefs) or _bad_dt(dt):
        return False
    array -= P.polyval(make_time_array(dt, len(array)), coefs)
    return True


def root_mean_square(orig, est):
    """RMS difference between two arrays; -1 on invalid input."""
    if _is_empty(orig) or _is_empty(est) or len(orig) != len(est):
        return -1
    diff = np.asarray(orig) - np.asarray(est)
    return math.sqrt(np.mean(diff**2))


def find_trend_with_best_fit(array, dt):
    """
    Return the coefficients of the best fitting line or parabola.

    The line is kept unless the parabola has a smaller RMS misfit, beyond
    the rounding error of the fits.
    """
    if _is_empty(array) or _bad_dt(dt):
        return EMPTY.copy()
    time = make_time_array(dt, len(array))
    lcoefs = find_polynomial_trend(array, 1, dt)
    linrms = root_mean_square(array, P.polyval(time, lcoefs))
    pcoefs = find_polynomial_trend(array, 2, dt)
    polrms = root_mean_square(array, P.polyval(time, pcoefs))
    atol = 1e-10 * np.max(np.abs(array))
    if linrms < polrms or np.isclose(linrms, polrms, rtol=1e-9, atol=atol):
        return lcoefs
    return pcoefs


def remove_trend_with_best_fit(array, dt):
    """
    Remove the best fitting line or parabola, in place.

    :return: the order of the removed trend, or -1 on invalid input
    :rtype: int
    """
    if _is_empty(array) or _bad_dt(dt):
        return -1
    coefs = find_trend_with_best_fit(array, dt)
    remove_polynomial_trend(array, coefs, dt)
    return len(coefs) - 1
# -----------------------------------------------------------------------------


# INTEGRATION AND DIFFERENTIATION ---------------------------------------------
def integrate(array, dt, init):
    """
    Trapezoidal cumulative integral, starting at ``init``.

    :param array: input array
    :type array: :class:`numpy.ndarray`
    :param dt: sampling interval (s)
    :type dt: float
    :param init: value of the first sample of the integral
    :type init: float
    :return: the integral, same length as the input
    :rtype: :class:`numpy.ndarray`
    """
    if _is_empty(array) or _bad_dt(dt):
        return EMPTY.copy()
    array = np.asarray(array, float)
    calc = np.empty(len(array))
    calc[0] = init
    calc[1:] = init + np.cumsum((array[:-1] + array[1:]) * dt / 2.)
    return calc


def central_diff(array, dt, order):
    """
    Central finite difference of order 3, 5, 7 or 9.

    Samples close to the edges use lower order stencils, down to a
    two-point difference for the first and last samples.
    """
    if (array is None or len(array) < order or dt <= 0 or
            order not in (3, 5, 7, 9)):
        return EMPTY.copy()
    x = np.asarray(array, float)
    n = len(x)
    diff = np.zeros(n)
    diff[0] = (x[1] - x[0]) / dt
    diff[-1] = (x[-1] - x[-2]) / dt
    diff[1] = (x[2] - x[0]) / (2 * dt)
    diff[-2] = (x[-1] - x[-3]) / (2 * dt)
    if order == 3:
        diff[2:n-2] = (x[3:n-1] - x[1:n-3]) / (2 * dt)
        return diff
    diff[2] = (x[0] - 8*x[1] + 8*x[3] - x[4]) / (12 * dt)
    diff[-3] = (x[-5] - 8*x[-4] + 8*x[-2] - x[-1]) / (12 * dt)
    if order == 5:
        i = np.arange(3, n - 3)
        diff[i] = (
            x[i-2] - 8*x[i-1] + 8*x[i+1] - x[i+2]) / (12 * dt)
        return diff
    diff[3] = (
        -x[0] + 9*x[1] - 45*x[2] + 45*x[4] - 9*x[5] + x[6]) / (60 * dt)
    i = np.arange(4, n - 4)
    if order == 7:
        diff[i] = (
            -x[i-3] + 9*x[i-2] - 45*x[i-1] + 45*x[i+1] - 9*x[i+2] + x[i+3]
        ) / (60 * dt)
    else:
        diff[i] = (
            3*x[i-4] - 32*x[i-3] + 168*x[i-2] - 672*x[i-1] +
            672*x[i+1] - 168*x[i+2] + 32*x[i+3] - 3*x[i+4]
        ) / (840 * dt)
    diff[-4] = (
        -x[-7] + 9*x[-6] - 45*x[-5] + 45*x[-3] - 9*x[-2] + x[-1]
    ) / (60 * dt)
    diff[-3] = (x[-5] - 8*x[-4] + 8*x[-2] - x[-1]) / (12 * dt)
    return diff


def differentiate(array, dt, order=5):
    """Differentiate the array with a central difference of given order."""
    return central_diff(array, dt, order)


def correct_for_zero_initial_estimate(array, upperlim):
    """
    Correct an integral computed with a zero initial value, in place.

    The mean of the samples between index 1 and the last zero crossing
    before ``upperlim`` is removed from the whole array.
    """
    intzero = find_zero_crossing(array, upperlim, 0)
    if intzero > 1:
        remove_value(array, ArrayStats(array[1:intzero]).mean)
# -----------------------------------------------------------------------------


# MISC ------------------------------------------------------------------------
def find_subset_mean(array, start, end):
    """Mean of ``array[start:end]``, ``MIN_VALUE`` on invalid bounds."""
    if (_is_empty(array) or start < 0 or end > len(array) or
            start >= end):
        return MIN_VALUE
    return ArrayStats(array[start:end]).mean


def counts_to_physical_values(counts, factor):
    """Convert integer counts into physical values."""
    if _is_empty(counts):
        return EMPTY.copy()
    return np.asarray(counts, float) * factor


def convert_array_units(array, factor):
    """Return a copy of the array multiplied by ``factor``."""
    if _is_empty(array):
        return EMPTY.copy()
    return np.asarray(array, float) * factor


def find_and_remove_mean(array):
    """Remove the mean in place and return it."""
    if _is_empty(array):
        return MIN_VALUE
    mean = ArrayStats(array).mean
    remove_value(array, mean)
    return mean


def calculate_power(array):
    """Squared amplitude of each sample."""
    if _is_empty(array):
        return EMPTY.copy()
    return np.asarray(array, float)**2


def calc_signal_to_noise_ratio(array, window_end):
    """
    Signal to noise ratio in dB.

    Signal is the mean power of the whole array, noise the mean power of
    the samples before ``window_end``.

    :return: the ratio, or -1 if it cannot be computed
    :rtype: float
    """
    if _is_empty(array) or window_end <= 0 or window_end > len(array):
        return -1
    power = calculate_power(array)
    signal = ArrayStats(power).mean
    noise = find_subset_mean(power, 0, window_end)
    if noise == 0:
        return -1.
    return 10. * math.log10(signal / noise)


def apply_cosine_taper(array, front_len, end_len):
    """
    Apply a half cosine taper to the first and last samples, in place.

    The taper covers ``front_len // 2`` samples at each end and the
    outermost samples are set to zero.

    :param front_len: taper window length at the beginning
    :type front_len: int
    :param end_len: taper window length at the end, equal to ``front_len``
    :type end_len: int
    :return: False (array untouched) if lengths differ, are not larger
        than one, or exceed half of the array
    :rtype: bool
    """
    if (_is_empty(array) or front_len != end_len or front_len <= 1 or
            2 * front_len > len(array)):
        return False
    m = front_len // 2
    taper = 0.5 * (1. - np.cos(2 * np.pi * np.arange(m) / (front_len - 1)))
    array[:m] *= taper
    array[len(array) - m:] *= taper[::-1]
    return True


def perform_3pt_smoothing(array):
    """Three-point weighted smoothing (0.25, 0.5, 0.25)."""
    if _is_empty(array):
        return EMPTY.copy()
    x = np.asarray(array, float)
    result = x.copy()
    if len(x) > 3:
        result[2:-1] = 0.5 * x[2:-1] + 0.25 * (x[1:-2] + x[3:])
    return result


def find_zero_crossing(array, start, stop):
    """
    Find a sign change scanning from ``start`` towards ``stop``.

    Scanning forward, the index before the crossing is returned (a zero
    sample counts as a crossing). Scanning backward, the index before the
    crossing is returned as well.

    :return: the index, -1 if there is no crossing, -2 on invalid input
    :rtype: int
    """
    if (_is_empty(array) or start < 0 or start > len(array) or
            stop < 0 or stop > len(array) or start == stop):
        return -2
    x = np.asarray(array)
    if start < stop:
        prod = x[start + 1:stop] * x[start:stop - 1]
        idx = np.flatnonzero(prod <= 0)
        return int(start + idx[0]) if len(idx) else -1
    start = min(start, len(x) - 1)
    k = np.arange(start, stop, -1)
    idx = np.flatnonzero(x[k] * x[k - 1] < 0)
    return int(k[idx[0]] - 1) if len(idx) else -1


def find_standard_dev(array, population=True):
    """Standard deviation; ``MAX_VALUE`` for less than two samples."""
    if array is None or len(array) < 2:
        return MAX_VALUE
    return float(np.std(array, ddof=0 if population else 1))


def find_closest_freq(freqs, target):
    """Index of the frequency closest to ``target``; -1 on invalid input."""
    if _is_empty(freqs) or target < 0:
        return -1
    # the first sample wins unless another one is strictly closer
    # than the value of the first frequency itself
    minval = freqs[0]
    minindex = 0
    for i, freq in enumerate(freqs):
        test = abs(freq - target)
        if test < minval:
            minindex = i
            minval = test
    return minindex


def interpolate(x, y, query_x, degree):
    """
    Piecewise polynomial interpolation of ``(x, y)`` at ``query_x``.

    Only linear interpolation (degree 1) is supported; any other degree,
    or less than two points in an input, gives an empty result.
    """
    if degree != 1:
        return EMPTY.copy()
    for arr in (x, y, query_x):
        if arr is None or len(arr) <= 1:
            return EMPTY.copy()
    if len(x) != len(y):
        return EMPTY.copy()
    return np.interp(query_x, x, y)
# -----------------------------------------------------------------------------
