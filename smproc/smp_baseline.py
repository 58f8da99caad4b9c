# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Baseline correction of acceleration records.

- ``TrendRemovalProcess``: removal of the pre-event mean and of the
  derivative of the best fitting velocity trend;
- ``FilterAndIntegrateProcess``: acausal band-pass filtering followed by
  integration to velocity and displacement;
- ``ABC``: adaptive baseline correction, which fits separate polynomials
  to the pre-event and post-event velocity, joined by a Hermite spline,
  and searches the second break point giving the smallest misfit.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import logging
import math
import numpy as np
from numpy.polynomial import polynomial as P
from .smp_array_ops import (
    correct_for_zero_initial_estimate, differentiate, find_polynomial_trend,
    find_trend_with_best_fit, integrate, make_time_array,
    remove_polynomial_trend, remove_value, root_mean_square)
from .smp_array_stats import ArrayStats
from .smp_constants import (
    V2Status, DEFAULT_DIFFORDER,
    DEFAULT_1ST_POLY_ORD_LOWER, DEFAULT_1ST_POLY_ORD_UPPER,
    DEFAULT_3RD_POLY_ORD_LOWER, DEFAULT_3RD_POLY_ORD_UPPER)
from .smp_errors import SmProcessingError
from .smp_fft import fft_integrate
from .smp_filter import ButterworthFilter
from .smp_qc import QCcheck
logger = logging.getLogger(__name__.rsplit('.', maxsplit=1)[-1])


def _integrate(array, dt, use_fft):
    if use_fft:
        return fft_integrate(array, dt)
    return integrate(array, dt, 0.)


class TrendRemovalProcess():
    """
    Pre-event mean and best-fit trend removal.

    :param start_index: event onset index
    :type start_index: int
    :param use_fft: integrate in the frequency domain
    :type use_fft: bool
    """

    def __init__(self, start_index, use_fft):
        self.start_index = start_index
        self.use_fft = use_fft
        self.pre_event_mean = 0.
        self.trend_removal_order = 0
        self.velocity = None

    def remove_trends(self, accel, dt):
        """
        Remove trends from the acceleration, in place.

        The velocity trend (line or parabola) is fitted after integration
        and its derivative is removed from the acceleration.

        :param accel: acceleration
        :type accel: :class:`numpy.ndarray`
        :param dt: sampling interval (s)
        :type dt: float
        :return: the velocity of the corrected acceleration
        :rtype: :class:`numpy.ndarray`

        :raises SmProcessingError: if the trend cannot be removed
        """
        if self.start_index > 0:
            self.pre_event_mean = ArrayStats(accel[:self.start_index]).mean
            remove_value(accel, self.pre_event_mean)
        velocity = _integrate(accel, dt, self.use_fft)
        correct_for_zero_initial_estimate(velocity, self.start_index)
        tcoefs = find_trend_with_best_fit(velocity, dt)
        # order of the acceleration trend
        self.trend_removal_order = len(tcoefs) - 2
        if not remove_polynomial_trend(accel, P.polyder(tcoefs), dt):
            raise SmProcessingError(
                'Unable to remove best fit differentiated trend from '
                'acceleration.')
        self.velocity = _integrate(accel, dt, self.use_fft)
        return self.velocity


class FilterAndIntegrateProcess():
    """
    Filter the acceleration and integrate to velocity and displacement.

    :param lowcut: band-pass low corner (Hz)
    :type lowcut: float
    :param highcut: band-pass high corner (Hz)
    :type highcut: float
    :param nroll: filter roll-off
    :type nroll: int
    :param taper_length: taper length (s)
    :type taper_length: float
    :param start_index: event onset index
    :type start_index: int
    :param use_fft: integrate in the frequency domain
    :type use_fft: bool
    """

    def __init__(self, lowcut, highcut, nroll, taper_length, start_index,
                 use_fft):
        self.lowcut = lowcut
        self.highcut = highcut
        self.nroll = nroll
        self.taper_length = taper_length
        self.start_index = start_index
        self.use_fft = use_fft
        self.velocity = None
        self.displacement = None
        self.padded_accel = None
        self.initial_vel = 0.
        self.initial_dis = 0.
        self.calculated_taper = 0.
        self.config_taper = 0.

    def filter_and_integrate(self, accel, dt):
        """
        Filter the acceleration in place and integrate it.

        Integration is performed on the padded acceleration; velocity and
        displacement are then cut to the original length.

        :raises SmProcessingError: if the filter parameters are invalid
        """
        bpfilter = ButterworthFilter()
        if not bpfilter.calculate_coefficients(
                self.lowcut, self.highcut, dt, self.nroll, True):
            raise SmProcessingError(
                'Invalid bandpass filter calculated parameters')
        self.padded_accel = bpfilter.apply_filter(
            accel, self.taper_length, self.start_index)
        self.calculated_taper = bpfilter.taper_length
        self.config_taper = bpfilter.end_taper_length
        padded_vel = _integrate(self.padded_accel, dt, self.use_fft)
        padded_dis = _integrate(padded_vel, dt, self.use_fft)
        start = bpfilter.pad_length
        self.velocity = padded_vel[start:start+len(accel)]
        self.displacement = padded_dis[start:start+len(accel)]
        self.initial_vel = self.velocity[0]
        self.initial_dis = self.displacement[0]


def _validate_order(config, key, default, lower, upper):
    value = config.get(key)
    if value is None:
        return default
    try:
        value = int(value)
    except (TypeError, ValueError) as err:
        raise SmProcessingError(
            'Unable to parse the adaptive baseline polynomial order '
            'values.') from err
    if value < lower or value > upper:
        raise SmProcessingError(
            'Adaptive baseline polynomial order values are invalid')
    return value


class ABC():
    """
    Adaptive baseline correction.

    The first break point is the event onset. The second break point is
    moved through the record in steps of ``moving_window`` samples, and
    for each position and each post-event polynomial order the corrected
    record is filtered, integrated and checked against the QC thresholds.
    Runs are ranked by the combined RMS misfit of the three segments.

    :param dt: sampling interval (s)
    :type dt: float
    :param velocity: velocity after trend removal
    :type velocity: :class:`numpy.ndarray`
    :param accel: acceleration after trend removal
    :type accel: :class:`numpy.ndarray`
    :param lowcut: band-pass low corner (Hz)
    :type lowcut: float
    :param highcut: band-pass high corner (Hz)
    :type highcut: float
    :param nroll: filter roll-off
    :type nroll: int
    :param event_onset: event onset index (first break point)
    :type event_onset: int
    :param taper_length: taper length (s)
    :type taper_length: float
    :param config: processing configuration
    :type config: :class:`~smproc.config.Config` or dict

    :raises SmProcessingError: if the polynomial orders are invalid
    """
    num_segments = 3
    moving_window = 200

    def __init__(self, dt, velocity, accel, lowcut, highcut, nroll,
                 event_onset, taper_length, config=None):
        config = config if config is not None else {}
        self.config = config
        self.dt = dt
        self.vel_start = velocity
        self.acc_start = accel
        self.lowcut = lowcut
        self.highcut = highcut
        self.nroll = nroll
        self.estart = event_onset
        self.taper_length = taper_length
        self.diff_order = config.get(
            'differentiation_order', DEFAULT_DIFFORDER)
        integration = config.get('integration_method', 'Freq')
        self.use_fft = str(integration).lower() == 'freq'
        self.degree_p1_lo = _validate_order(
            config, 'abc_first_poly_order_lower', DEFAULT_1ST_POLY_ORD_LOWER,
            DEFAULT_1ST_POLY_ORD_LOWER, DEFAULT_1ST_POLY_ORD_UPPER)
        self.degree_p1_hi = _validate_order(
            config, 'abc_first_poly_order_upper', DEFAULT_1ST_POLY_ORD_UPPER,
            self.degree_p1_lo, DEFAULT_1ST_POLY_ORD_UPPER)
        self.degree_p3_lo = _validate_order(
            config, 'abc_third_poly_order_lower', DEFAULT_3RD_POLY_ORD_LOWER,
            DEFAULT_3RD_POLY_ORD_LOWER, DEFAULT_3RD_POLY_ORD_UPPER)
        self.degree_p3_hi = _validate_order(
            config, 'abc_third_poly_order_upper', DEFAULT_3RD_POLY_ORD_UPPER,
            self.degree_p3_lo, DEFAULT_3RD_POLY_ORD_UPPER)
        self.rms = np.zeros(self.num_segments)
        self.b1 = None
        self.bnn = None
        self.deriv_bnn = None
        self.best_first_degree = 0
        self.params = []
        self.ranking = []
        self.solution = 0
        self.counter = 1
        self.accel = None
        self.velocity = None
        self.displacement = None
        self.padded_accel = None
        self.calculated_taper = 0.
        self.config_taper = 0.

    def find_fit(self):
        """
        Search the best baseline correction.

        Each run is stored in :attr:`params` as a list of 14 values:
        combined RMS, residual displacement, initial velocity, residual
        velocity, first break, second break, first polynomial order, third
        polynomial order, run counter, RMS of each segment and two unused
        values.

        :return: ``GOOD`` if a run passes QC, ``FAILQC`` otherwise,
            ``NOABC`` if no run could be made
        :rtype: :class:`~smproc.smp_constants.V2Status`

        :raises SmProcessingError: if the filter parameters are invalid
        """
        vlen = len(self.vel_start)
        endval = min(int(0.8 * vlen), vlen - 5)
        startval = self.estart + self.moving_window
        self.params = []
        qcchecker = QCcheck(self.config)
        qcchecker.validate_qc_values()
        qcchecker.find_window(self.lowcut, 1. / self.dt, self.estart)
        bpfilter = ButterworthFilter()
        if not bpfilter.calculate_coefficients(
                self.lowcut, self.highcut, self.dt, self.nroll, True):
            raise SmProcessingError(
                'ABC: Invalid bandpass filter input parameters')
        # the spline needs 4 samples before the first break point
        if self.estart < 4:
            logger.warning(
                f'ABC: event onset at sample {self.estart} is too early')
            return V2Status.NOABC
        self.rms[0] = self._find_first_polynomial_fit()
        for order3 in range(self.degree_p3_lo, self.degree_p3_hi + 1):
            for break2 in range(startval, endval + 1, self.moving_window):
                if (break2 - self.estart) * self.dt < 1. / self.lowcut:
                    continue
                self._process_the_arrays(break2, order3, False)
                qcchecker.qc_velocity(self.velocity)
                qcchecker.qc_displacement(self.displacement)
                onerun = [
                    math.sqrt(np.sum(self.rms**2)),
                    abs(qcchecker.dis_end),
                    abs(qcchecker.vel_start),
                    abs(qcchecker.vel_end),
                    self.estart, break2, self.best_first_degree, order3,
                    self.counter, self.rms[0], self.rms[1], self.rms[2],
                    0, 0]
                # a solution peaking at the first sample is rejected
                peak = ArrayStats(self.accel).peak_val
                if abs(abs(self.accel[0]) - abs(peak)) < \
                        5 * np.spacing(abs(self.accel[0])):
                    onerun[0] = 1000
                self.params.append(onerun)
                self.counter += 1
        if not self.params:
            return V2Status.NOABC
        self.ranking = sorted(
            range(len(self.params)), key=lambda idx: self.params[idx][0])
        for idx in self.ranking:
            run = self.params[idx]
            if (run[2] <= qcchecker.qc_vel_init and
                    run[3] <= qcchecker.qc_vel_res and
                    run[1] <= qcchecker.qc_dis_res):
                self._process_the_arrays(int(run[5]), int(run[7]),
                                         self.use_fft)
                self.solution = idx
                logger.debug(f'ABC: run {idx} passed QC')
                return V2Status.GOOD
        self.solution = 0
        run = self.params[self.solution]
        self._process_the_arrays(int(run[5]), int(run[7]), self.use_fft)
        logger.debug(f'ABC: no run passed QC out of {len(self.params)}')
        return V2Status.FAILQC

    def _find_first_polynomial_fit(self):
        npts = self.estart + 1
        h1 = self.vel_start[:npts]
        time = make_time_array(self.dt, npts)
        bestrms = np.finfo(float).max
        bestcoefs = None
        for order1 in range(self.degree_p1_lo, self.degree_p1_hi + 1):
            coefs = find_polynomial_trend(h1, order1, self.dt)
            rms1 = root_mean_square(h1, P.polyval(time, coefs))
            if rms1 < bestrms:
                bestrms = rms1
                self.best_first_degree = order1
                bestcoefs = coefs
        self.b1 = P.polyval(time, bestcoefs)
        return bestrms

    def _process_the_arrays(self, break2, order3, use_fft):
        self._make_correction(break2, order3, use_fft)
        filterint = FilterAndIntegrateProcess(
            self.lowcut, self.highcut, self.nroll, self.taper_length,
            self.estart, use_fft)
        filterint.filter_and_integrate(self.accel, self.dt)
        self.padded_accel = filterint.padded_accel
        self.velocity = filterint.velocity
        self.displacement = filterint.displacement
        self.calculated_taper = filterint.calculated_taper
        self.config_taper = filterint.config_taper

    def _make_correction(self, break2, order3, use_fft):
        break1 = self.estart
        vel = self.vel_start
        h2 = vel[break1+1:break2]
        h3 = vel[break2:]
        coefs = find_polynomial_trend(h3, order3, self.dt)
        b3 = P.polyval(make_time_array(self.dt, len(h3)), coefs)
        bnn = np.zeros(len(vel))
        bnn[:break1+1] = self.b1
        bnn[break2:] = b3
        self.get_spline_smooth(bnn, break1, break2, self.dt)
        self.bnn = bnn
        self.deriv_bnn = differentiate(bnn, self.dt, self.diff_order)
        self.accel = self.acc_start - self.deriv_bnn
        self.velocity = _integrate(self.accel, self.dt, use_fft)
        correct_for_zero_initial_estimate(self.velocity, self.estart)
        self.rms[1] = root_mean_square(h2, bnn[break1+1:break2])
        self.rms[2] = root_mean_square(h3, b3)

    @staticmethod
    def get_spline_smooth(vals, break1, break2, dt):
        """
        Join two baseline segments with a cubic Hermite spline, in place.

        End values are ``vals[break1]`` and ``vals[break2]``; end slopes
        are estimated with five-point one-sided differences. Without four
        samples before ``break1`` and after ``break2``, the segments are
        joined by a straight line.

        :param vals: baseline values
        :type vals: :class:`numpy.ndarray`
        :param break1: last sample of the first segment
        :type break1: int
        :param break2: first sample of the last segment
        :type break2: int
        :param dt: sampling interval (s)
        :type dt: float
        :return: False if the straight line was used
        :rtype: bool
        """
        if break1 < 4 or break2 + 4 >= len(vals):
            last = min(break2, len(vals) - 1)
            vals[break1+1:last] = np.interp(
                np.arange(break1 + 1, last), [break1, last],
                [vals[break1], vals[last]])
            return False
        t1 = break1 * dt
        t2 = break2 * dt
        dt12 = 12. * dt
        t21 = t2 - t1
        a = vals[break1]
        b = vals[break2]
        c = (3. * vals[break1-4] - 16. * vals[break1-3] +
             36. * vals[break1-2] - 48. * vals[break1-1] +
             25. * vals[break1]) / dt12
        d = (-25. * vals[break2] + 48. * vals[break2+1] -
             36. * vals[break2+2] + 16. * vals[break2+3] -
             3. * vals[break2+4]) / dt12
        time = np.arange(break1 + 1, break2) * dt
        start = time - t1
        end = time - t2
        vals[break1+1:break2] = (
            (1. + 2. * start / t21) * end**2 * a +
            (1. - 2. * end / t21) * start**2 * b +
            start * end**2 * c +
            end * start**2 * d) / t21**2
        return True
