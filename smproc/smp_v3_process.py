# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
V3 processing: Fourier amplitude and response spectra.

The response of a single degree of freedom oscillator is computed with
the recursion::

    y0[k] = a*y0[k-1] + b*y1[k-1] + e*acc[k]
    y1[k] = c*y0[k-1] + d*y1[k-1] + f*acc[k]

which is applied as an IIR filter on the padded V2 acceleration.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import logging
import math
import numpy as np
from scipy.signal import lfilter
from .smp_array_ops import perform_3pt_smoothing
from .smp_array_stats import ArrayStats
from .smp_computed_params import housner_intensity
from .smp_constants import (
    V3_DAMPING_VALUES, NUM_T_PERIODS, MSEC_TO_SEC, DELTA_T)
from .smp_errors import SmProcessingError
from .smp_fft import calculate_fft, power2_length
from .smp_spectra_resources import get_coef_array, get_t_periods
from .smp_trace import get_smproc_header
logger = logging.getLogger(__name__.rsplit('.', maxsplit=1)[-1])

EPSILON = 0.0001
# periods (s) of the Sa ordinates stored in the header
SA_PERIODS = (0.2, 0.3, 1.0, 3.0)
SA_DAMPING = 0.05


def oscillator_displacement(acc, coefs):
    """
    Relative displacement of the oscillator.

    :param acc: input acceleration
    :type acc: :class:`numpy.ndarray`
    :param coefs: recursion coefficients (a, b, c, d, e, f)
    :type coefs: sequence of float
    :return: the displacement, starting at rest
    :rtype: :class:`numpy.ndarray`
    """
    coef_a, coef_b, coef_c, coef_d, coef_e, coef_f = coefs
    # the recursion starts at rest, ignoring the first input sample
    forcing = np.array(acc, dtype=float)
    forcing[0] = 0.
    num = [coef_e, coef_b * coef_f - coef_d * coef_e]
    den = [1., -(coef_a + coef_d), coef_a * coef_d - coef_b * coef_c]
    return lfilter(num, den, forcing)


def fas_at_periods(spectrum, delta_f, periods):
    """
    Linear interpolation of a spectrum at the frequencies ``1/periods``.

    The search for each frequency starts from the bin found for the
    previous (longer) period.

    :param spectrum: amplitude spectrum
    :type spectrum: :class:`numpy.ndarray`
    :param delta_f: frequency step of the spectrum (Hz)
    :type delta_f: float
    :param periods: periods, in increasing order
    :type periods: :class:`numpy.ndarray`
    :return: the spectrum at each period
    :rtype: :class:`numpy.ndarray`
    """
    values = np.zeros(len(periods))
    ctr = 0
    for idx in range(len(periods) - 1, -1, -1):
        freq = 1. / periods[idx]
        for arr in range(ctr, len(spectrum)):
            if arr * delta_f > freq or abs(arr * delta_f - freq) < EPSILON:
                ctr = arr
                break
        if ctr == 0 or abs(ctr * delta_f - freq) < EPSILON:
            values[idx] = spectrum[ctr]
            continue
        lval = spectrum[ctr-1]
        uval = spectrum[ctr]
        scale = (freq - (ctr - 1) * delta_f) / delta_f
        values[idx] = lval + scale * (uval - lval)
    return values


class V3Process():
    """
    Compute the response spectra of a V2 acceleration trace.

    :param trace: V2 acceleration trace
    :type trace: :class:`~obspy.core.trace.Trace`
    :param padded_accel: filtered acceleration, including the padding
    :type padded_accel: :class:`numpy.ndarray`
    :param config: processing configuration
    :type config: :class:`~smproc.config.Config`
    :param strong_motion: True for a strong motion record, for which the
        Housner intensity is computed
    :type strong_motion: bool

    :raises SmProcessingError: if the sampling interval is not valid
    """

    def __init__(self, trace, padded_accel, config, strong_motion=False):
        self.v2_trace = trace
        self.padded_accel = np.asarray(padded_accel, dtype=float)
        self.config = config
        self.strong_motion = strong_motion
        header = get_smproc_header(trace)
        delta_t = header.real_header[DELTA_T]
        if (abs(delta_t - header.no_real_value) < EPSILON or
                delta_t <= 0):
            raise SmProcessingError(
                f'{trace.id}: Real header #{DELTA_T + 1}, delta t, is '
                f'invalid: {delta_t}')
        self.dt = delta_t * MSEC_TO_SEC
        self.sample_rate = 1. / self.dt
        self.periods = get_t_periods()
        self.coefs = [
            get_coef_array(self.sample_rate, damping)
            for damping in V3_DAMPING_VALUES]
        self.full_acc_spectra = bool(config.get('full_acc_spectra', False))
        self.fas = None
        self.spectra = {}
        self.housner_intensity = 0.
        self.peak_val = 0.
        self.peak_period = 0.
        self.peak_time = 0.
        self.sa_values = {}
        self.sa_table = None

    def process(self):
        """
        Compute the Fourier amplitude spectrum and the response spectra.
        """
        self._compute_fas()
        for damping, coefs in zip(V3_DAMPING_VALUES, self.coefs):
            sd = np.zeros(NUM_T_PERIODS)
            for idx, period_coefs in enumerate(coefs):
                disp = oscillator_displacement(
                    self.padded_accel, period_coefs)
                sd[idx] = abs(ArrayStats(disp).peak_val)
            omega = 2. * math.pi / self.periods
            sv = sd * omega
            sa = sv * omega
            self.spectra[damping] = (sd, sv, sa)
            if abs(damping - SA_DAMPING) < EPSILON:
                self._five_percent_values(sv, sa)
        logger.info(
            f'{self.v2_trace.id}: peak Sa {self.peak_val:.4f} cm/sec2 at '
            f'{self.peak_period:.3f} s')

    def _compute_fas(self):
        accspec = calculate_fft(self.padded_accel) * self.dt
        delta_f = 1. / (power2_length(len(self.padded_accel)) * self.dt)
        smooth = perform_3pt_smoothing(accspec)
        # ends are smoothed with their single neighbour
        smooth[0] = 0.5 * smooth[0] + 0.5 * smooth[1]
        smooth[-1] = 0.5 * smooth[-1] + 0.5 * smooth[-2]
        self.fas = fas_at_periods(smooth, delta_f, self.periods)

    def _five_percent_values(self, sv, sa):
        if self.strong_motion:
            self.housner_intensity = housner_intensity(sv, self.periods)
        stats = ArrayStats(sa)
        self.peak_val = stats.peak_val
        self.peak_period = self.periods[stats.peak_index]
        self.peak_time = 1. / self.peak_period
        for target in SA_PERIODS:
            idx = np.flatnonzero(np.abs(self.periods - target) < EPSILON)
            if len(idx):
                self.sa_values[target] = sa[idx[0]]
        if self.full_acc_spectra:
            self.sa_table = np.column_stack((self.periods, sa))
        else:
            self.sa_table = np.array(
                [(period, value) for period, value in self.sa_values.items()])

    def get_v3_arrays(self):
        """
        V3 arrays: the periods, the Fourier amplitude spectrum, and Sd, Sv
        and Sa for each damping value.

        :rtype: list of :class:`numpy.ndarray`
        """
        arrays = [self.periods, self.fas]
        for damping in V3_DAMPING_VALUES:
            arrays.extend(self.spectra[damping])
        return arrays
