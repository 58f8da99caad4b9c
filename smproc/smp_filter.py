# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Butterworth band-pass filter.

The filter is designed as a cascade of ``2*nroll`` second-order sections
through the bilinear transform and applied with
:func:`scipy.signal.sosfilt`. The acausal (zero-phase) version filters the
zero-padded record forward and then backward.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import logging
import math
import numpy as np
from scipy.signal import sosfilt
from .smp_array_ops import apply_cosine_taper, find_zero_crossing
logger = logging.getLogger(__name__.rsplit('.', maxsplit=1)[-1])

MAXROLL = 8
EPSILON = 0.001


class ButterworthFilter():
    """Band-pass Butterworth filter with zero-crossing taper and padding."""

    def __init__(self):
        self.f1 = self.f2 = 0.
        self.dt = 0.
        self.nroll = 0
        self.acausal = True
        self.sos = None
        self.npad = 0
        self.taper_count = 0
        self.taper_end = 0

    def calculate_coefficients(self, lowcut, highcut, dt, nroll,
                               acausal=True):
        """
        Compute the second-order sections of the filter.

        :param lowcut: low corner frequency (Hz)
        :type lowcut: float
        :param highcut: high corner frequency (Hz)
        :type highcut: float
        :param dt: sampling interval (s)
        :type dt: float
        :param nroll: filter roll-off, half the filter order (1 to 8)
        :type nroll: int
        :param acausal: True for a zero-phase filter
        :type acausal: bool
        :return: False if the parameters are not valid
        :rtype: bool
        """
        self.f1 = lowcut
        self.f2 = highcut
        self.dt = dt
        self.nroll = nroll
        self.acausal = acausal
        self.sos = None
        if (abs(lowcut) < EPSILON or abs(highcut - lowcut) < EPSILON or
                nroll < 1 or nroll > MAXROLL):
            return False
        nyquist = 0.5 / dt
        if abs(lowcut - nyquist) < EPSILON or abs(highcut - nyquist) < EPSILON:
            return False
        w1 = 2. * math.tan(math.pi * lowcut * dt) / dt
        w2 = 2. * math.tan(math.pi * highcut * dt) / dt
        bandwidth = w2 - w1
        sos = np.zeros((2 * nroll, 6))
        for k in range(1, nroll + 1):
            pre = -math.sin(math.pi * (2. * k - 1) / (4. * nroll))
            pim = math.cos(math.pi * (2. * k - 1) / (4. * nroll))
            argre = (pre**2 - pim**2) * bandwidth**2 / 4. - w1 * w2
            argim = 2. * pre * pim * bandwidth**2 / 4.
            rho = (argre**2 + argim**2)**0.25
            theta = math.pi + math.atan2(argim, argre) / 2.
            for i in (1, 2):
                sign = (-1)**i
                sjre = (pre * bandwidth / 2. +
                        sign * rho * -math.sin(theta - math.pi / 2.))
                sjim = (pim * bandwidth / 2. +
                        sign * rho * math.cos(theta - math.pi / 2.))
                bj = -2. * sjre
                cj = sjre**2 + sjim**2
                con = 1. / (2. / dt + bj + cj * dt / 2.)
                fact = bandwidth * con
                sos[2*k+i-3] = (
                    fact, 0., -fact, 1.,
                    (cj * dt - 4. / dt) * con,
                    (2. / dt - bj + cj * dt / 2.) * con)
        self.sos = sos
        return True

    def apply_filter(self, array, taper_length, event_onset_index):
        """
        Taper and filter the array.

        The front taper extends up to the last zero crossing before the
        event onset, with a minimum of twice ``taper_length``; the end
        taper is twice ``taper_length``. The input array is replaced by
        the filtered values.

        :param array: input array, modified in place
        :type array: :class:`numpy.ndarray`
        :param taper_length: taper length (s)
        :type taper_length: float
        :param event_onset_index: event onset index
        :type event_onset_index: int
        :return: the filtered array, padded if the filter is acausal
        :rtype: :class:`numpy.ndarray`
        """
        dt = self.dt
        self.taper_count = find_zero_crossing(array, event_onset_index, 0)
        if self.taper_count <= 0 or self.taper_count * dt < taper_length:
            self.taper_count = int(2. * taper_length / dt)
        self.taper_end = int(2. * taper_length / dt)
        if self.acausal:
            if self.taper_count > 0:
                apply_cosine_taper(array, self.taper_count, self.taper_end)
            self.npad = int(math.floor(3. * self.nroll / (self.f1 * dt)))
            self.npad = max(
                self.npad,
                int(math.floor(6. * self.nroll / ((self.f2 - self.f1) * dt))))
            filtered = np.zeros(len(array) + self.npad)
            start = self.npad // 2
            filtered[start:start+len(array)] = array
        else:
            self.npad = 0
            filtered = np.asarray(array, float).copy()
        filtered = sosfilt(self.sos, filtered)
        if self.acausal:
            filtered = sosfilt(self.sos, filtered[::-1])[::-1].copy()
        start = self.npad // 2
        array[:] = filtered[start:start+len(array)]
        logger.debug(
            f'Band-pass {self.f1:.3f}-{self.f2:.3f} Hz, '
            f'{2 * self.nroll} poles, {self.npad} padding samples')
        return filtered

    @property
    def pad_length(self):
        """Number of padding samples added in front of the record."""
        return self.npad // 2

    @property
    def taper_length(self):
        """Length of the front taper (s)."""
        return self.taper_count * self.dt

    @property
    def end_taper_length(self):
        """Length of the end taper (s)."""
        return self.taper_end * self.dt
