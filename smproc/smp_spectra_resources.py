# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Periods and recursive filter coefficients for response spectra.

The response of a damped single degree of freedom oscillator is computed
with the recursion::

    y0[k] = a*y0[k-1] + b*y1[k-1] + e*acc[k]
    y1[k] = c*y0[k-1] + d*y1[k-1] + f*acc[k]

where ``y0`` is the relative displacement and ``y1`` the relative
velocity. Coefficients are the exact discretisation of the oscillator
equation for an acceleration held constant over each sampling interval,
obtained from the exponential of the augmented system matrix.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
from functools import lru_cache
import numpy as np
from scipy.linalg import expm
from .smp_constants import V3_DAMPING_VALUES, V3_SAMPLING_RATES

EPSILON = 1e-6

T_PERIODS = np.array([
    0.010, 0.020, 0.025, 0.030, 0.035, 0.040, 0.045, 0.050, 0.055, 0.060,
    0.065, 0.070, 0.075, 0.080, 0.090, 0.100, 0.110, 0.120, 0.130, 0.140,
    0.150, 0.160, 0.170, 0.180, 0.190, 0.200, 0.220, 0.240, 0.250, 0.260,
    0.280, 0.300, 0.320, 0.340, 0.350, 0.360, 0.380, 0.400, 0.420, 0.440,
    0.450, 0.460, 0.480, 0.500, 0.550, 0.600, 0.650, 0.700, 0.750, 0.800,
    0.850, 0.900, 0.950, 1.000, 1.100, 1.200, 1.300, 1.500, 1.600, 1.800,
    2.000, 2.200, 2.400, 2.600, 2.800, 3.000, 3.200, 3.400, 3.500, 3.600,
    3.800, 4.000, 4.200, 4.400, 4.600, 4.800, 5.000, 5.500, 6.000, 6.500,
    7.000, 7.500, 8.000, 8.500, 9.000, 9.500, 10.00, 11.00, 12.00, 13.00,
    15.00
])
T_PERIODS.flags.writeable = False


def oscillator_coefficients(period, damping, dt):
    """
    Recursion coefficients for one oscillator.

    :param period: natural period (s)
    :type period: float
    :param damping: damping ratio
    :type damping: float
    :param dt: sampling interval (s)
    :type dt: float
    :return: coefficients (a, b, c, d, e, f)
    :rtype: :class:`numpy.ndarray`
    """
    omega = 2. * np.pi / period
    system = np.zeros((3, 3))
    system[0, 1] = 1.
    system[1, 0] = -omega**2
    system[1, 1] = -2. * damping * omega
    system[1, 2] = -1.
    transition = expm(system * dt)
    return np.array([
        transition[0, 0], transition[0, 1],
        transition[1, 0], transition[1, 1],
        transition[0, 2], transition[1, 2]])


@lru_cache(maxsize=None)
def _coef_table(sample_rate, damping):
    table = np.array([
        oscillator_coefficients(period, damping, 1. / sample_rate)
        for period in T_PERIODS])
    table.flags.writeable = False
    return table


def get_t_periods():
    """Return the table of periods (s)."""
    return T_PERIODS


def get_coef_array(sample_rate, damping):
    """
    Return the coefficient table for a sampling rate and damping.

    Unsupported values fall back to the first sampling rate and damping.

    :param sample_rate: sampling rate (samples/s), one of 50, 100, 200, 500
    :type sample_rate: float
    :param damping: damping ratio, one of 0, 0.02, 0.05, 0.1, 0.2
    :type damping: float
    :return: array of shape (number of periods, 6), read only
    :rtype: :class:`numpy.ndarray`
    """
    rate = next(
        (r for r in V3_SAMPLING_RATES if abs(r - sample_rate) < EPSILON),
        V3_SAMPLING_RATES[0])
    damp = next(
        (d for d in V3_DAMPING_VALUES if abs(d - damping) < EPSILON),
        V3_DAMPING_VALUES[0])
    table = _coef_table(rate, damp)
    return table
