# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Strong-motion parameters computed from corrected acceleration.

Parameters are computed only for strong motion records, i.e. records whose
peak acceleration reaches a threshold, expressed as a percentage of g.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import math
import numpy as np
from .smp_array_ops import convert_array_units
from .smp_array_stats import ArrayStats
from .smp_constants import FROM_G_CONVERSION, TO_G_CONVERSION

# Housner intensity integration range, as indices in the period table
INDEX_P1_SEC = 15
INDEX_2P4_SEC = 62
INDEX_2P6_SEC = 63
# acceleration (g) for a one-second window to count in the CAV
CAV_THRESHOLD = 0.025


def housner_intensity(sv, periods):
    """
    Housner intensity: integral of the pseudo-velocity spectrum between
    0.1 and 2.5 s.

    :param sv: spectral velocity at each period of the period table
    :type sv: :class:`numpy.ndarray`
    :param periods: period table (s)
    :type periods: :class:`numpy.ndarray`
    :return: the Housner intensity
    :rtype: float
    """
    psv = np.array(sv[INDEX_P1_SEC:INDEX_2P6_SEC+1], float)
    period = np.array(periods[INDEX_P1_SEC:INDEX_2P6_SEC+1], float)
    # last point interpolated at 2.5 s
    period[-1] = 2.5
    psv[-1] = (sv[INDEX_2P6_SEC] + sv[INDEX_2P4_SEC]) / 2.
    return float(np.sum((psv[:-1] + psv[1:]) / 2. * np.diff(period)))


class ComputedParams():
    """
    Bracketed duration, duration interval, Arias intensity, RMS
    acceleration and cumulative absolute velocity.

    :param acc: acceleration (cm/s^2)
    :type acc: :class:`numpy.ndarray`
    :param dt: sampling interval (s)
    :type dt: float
    :param threshold: strong motion threshold (percent of g)
    :type threshold: float
    """

    def __init__(self, acc, dt, threshold):
        self.acc = np.asarray(acc, float)
        self.dt = dt
        self.npts = len(self.acc)
        self.threshold = threshold / 100.
        self.gacc = convert_array_units(self.acc, TO_G_CONVERSION)
        self.gaccsq = self.gacc**2
        self.sum_gaccsq = (
            0.5 * (self.gaccsq[0] + self.gaccsq[-1]) * dt +
            np.sum(self.gaccsq[1:-1]) * dt)
        self.brack_start = 0
        self.brack_end = 0
        self.bracketed_duration = 0.
        self.duration_interval = 0.
        self.dur_start = 0.
        self.dur_end = 0.
        self.arias_intensity = 0.
        self.housner_intensity = 0.
        self.rms_acceleration = 0.
        self.cav = 0.

    def calculate(self):
        """
        Compute all the parameters.

        :return: False if the record is not a strong motion record
        :rtype: bool
        """
        if not self.calculate_bracketed_duration():
            return False
        self.calculate_duration_interval()
        self.arias_intensity = (
            self.sum_gaccsq * math.pi / 2. * FROM_G_CONVERSION * 0.01)
        self.calculate_rms_acceleration()
        self.calculate_cumulative_abs_velocity()
        return True

    def calculate_bracketed_duration(self):
        """Time between the first and last exceedance of the threshold."""
        if abs(ArrayStats(self.gacc).peak_val) < self.threshold:
            return False
        above = np.flatnonzero(np.abs(self.gacc) > self.threshold)
        if len(above):
            self.brack_start = int(above[0])
            self.brack_end = int(above[-1])
        self.bracketed_duration = (
            (self.brack_end - self.brack_start) * self.dt)
        return True

    def calculate_duration_interval(self):
        """Time between 5% and 95% of the Arias intensity."""
        dt = self.dt
        ia95 = 0.95 * self.sum_gaccsq
        ia05 = 0.05 * self.sum_gaccsq
        gsq = self.gaccsq
        # running trapezoid up to sample i, for i >= 2
        dsum = (0.5 * gsq[0] * dt + gsq[1] * dt +
                np.concatenate(([0.], np.cumsum(gsq[2:-1] * dt))) +
                0.5 * gsq[2:] * dt)

        def _first(target):
            hits = np.flatnonzero(
                (np.abs(dsum - target) < 0.01 * target) | (dsum > target))
            return (int(hits[0]) + 2) * dt if len(hits) else 0.

        t05 = _first(ia05)
        t95 = _first(ia95)
        self.dur_start = t05
        self.dur_end = t95
        self.duration_interval = t95 - t05

    def calculate_rms_acceleration(self):
        """RMS acceleration over the duration interval (g)."""
        interval = self.dur_end - self.dur_start
        if interval <= 0:
            self.rms_acceleration = 0.
            return self.rms_acceleration
        startd = int(self.dur_start / self.dt)
        endd = int(self.dur_end / self.dt)
        total = np.sum((self.acc[startd:endd+1] / 100.)**2)
        self.rms_acceleration = math.sqrt(total / interval) / 10.
        return self.rms_acceleration

    def calculate_cumulative_abs_velocity(self):
        """
        Cumulative absolute velocity of the one-second windows where the
        acceleration exceeds 0.025 g.
        """
        step = int(round(1. / self.dt))
        numsecs = int(math.floor(self.dt * self.npts))
        if step * numsecs <= self.npts:
            length_secs = step * numsecs
        else:
            length_secs = step * (numsecs - 1)
        self.cav = 0.
        for k in range(0, length_secs, step):
            window = slice(k, k + step)
            if np.any(np.abs(self.gacc[window]) > CAV_THRESHOLD):
                self.cav += np.sum(np.abs(self.acc[window])) * 0.01 * self.dt
        return self.cav
