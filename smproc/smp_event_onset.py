# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Event onset detection.

Two pickers are available:

- AIC: minimum of the Akaike Information Criterion characteristic
  function;
- PWD: P-phase onset from the viscous damping energy of a damped single
  degree of freedom oscillator subjected to the record.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import logging
import numpy as np
from .smp_array_ops import differentiate, integrate, remove_linear_trend
from .smp_array_stats import ArrayStats
from .smp_constants import EventOnsetType
from .smp_errors import SmProcessingError
from .smp_filter import ButterworthFilter
logger = logging.getLogger(__name__.rsplit('.', maxsplit=1)[-1])


class AICEventDetect():
    """Akaike Information Criterion onset picker."""

    def __init__(self):
        self.index = 0
        self.buffered_index = 0

    @staticmethod
    def aic_values(segment):
        """
        AIC characteristic function ``k*log(var(x[:k])) +
        (n-k)*log(var(x[k:]))``.

        Sample variances which are undefined or not positive contribute
        zero. The last value is left at zero.
        """
        npts = len(segment)
        aic = np.zeros(npts)
        if npts < 2:
            return aic
        x = np.asarray(segment, float)
        k = np.arange(npts - 1)
        csum = np.concatenate(([0.], np.cumsum(x)))
        csum2 = np.concatenate(([0.], np.cumsum(x**2)))
        with np.errstate(divide='ignore', invalid='ignore'):
            # prefix x[:k]
            var1 = (csum2[k] - csum[k]**2 / k) / (k - 1)
            # suffix x[k:]
            nsuf = npts - k
            sum_suf = csum[-1] - csum[k]
            sum2_suf = csum2[-1] - csum2[k]
            var2 = (sum2_suf - sum_suf**2 / nsuf) / (nsuf - 1)
            s1 = np.where(var1 > 0, np.log(np.where(var1 > 0, var1, 1.)), 0.)
            s2 = np.where(var2 > 0, np.log(np.where(var2 > 0, var2, 1.)), 0.)
        aic[:-1] = k * s1 + nsuf * s2
        return aic

    def calculate_index(self, array, mode=None):
        """
        Compute the onset index.

        :param array: input array
        :type array: :class:`numpy.ndarray`
        :param mode: ``"topeak"`` (or ``"to_peak"``, case insensitive) to
            search only before the absolute peak, anything else to search
            the whole trace
        :type mode: str
        :return: the onset index, -1 on empty input
        :rtype: int
        """
        if array is None or len(array) == 0:
            self.index = -1
            return self.index
        data = np.asarray(array, float) - np.median(array)
        if mode is not None and mode.lower() in ('topeak', 'to_peak'):
            data = data[:ArrayStats(data).peak_index]
        aic = self.aic_values(data)
        self.index = ArrayStats(aic).min_index + 1
        return self.index

    def apply_buffer(self, buffer, dt):
        """
        Move the onset back by ``buffer`` seconds.

        :return: the buffered index (not less than 0), -1 if ``dt`` is zero
        :rtype: int
        """
        if abs(dt) < 5 * np.spacing(dt):
            self.buffered_index = -1
        else:
            self.buffered_index = max(0, self.index - int(round(buffer / dt)))
        return self.buffered_index


# Transition matrix (a, b, c, d) and input vector (e, f) of the PWD
# oscillator, by sampling interval in units of 0.1 ms
PWD_COEFFICIENTS = {
    20: (0.55004, 0.00079, -311.99721, -0.04583, 0.0, 0.00079),
    50: (-0.05590, 0.00018, -70.09431, -0.18977, 0.0, 0.00018),
    100: (-0.00932, -0.00004, 17.22045, 0.02357, 0.0, -0.00004),
    200: (-0.00066, -0.00000, 0.24536, -0.00020, 0.0, 0.0),
}


class EventOnsetDetection():
    """
    PWD onset picker.

    :param dt: sampling interval (s); supported values are 0.002, 0.005,
        0.01 and 0.02
    :type dt: float
    """
    num_bins = 200
    damping = 0.6
    period = 0.01
    diff_order = 5

    def __init__(self, dt):
        self.dt = dt
        self.omega = 2. * np.pi / self.period
        self.const_c = 2. * self.damping * self.omega
        self.coefs = PWD_COEFFICIENTS.get(int(round(dt * 10000)))
        self.event_start = 0
        self.buffer = 0.
        self.buffered_start = 0

    def find_event_onset(self, acc_total):
        """
        Compute the onset index.

        Only the part of the record before the absolute peak is used.

        :param acc_total: acceleration
        :type acc_total: :class:`numpy.ndarray`
        :return: the onset index, -1 on empty input or unsupported
            sampling interval
        :rtype: int
        """
        if acc_total is None or len(acc_total) == 0 or self.coefs is None:
            self.event_start = -1
            return self.event_start
        acc = np.asarray(acc_total, float)
        acc = acc[:ArrayStats(acc).peak_index]
        npts = len(acc)
        coef_a, coef_b, coef_c, coef_d, coef_e, coef_f = self.coefs
        disp = np.zeros(npts)
        veloc = np.zeros(npts)
        for k in range(1, npts):
            disp[k] = (coef_a * disp[k-1] + coef_b * veloc[k-1] +
                       coef_e * acc[k])
            veloc[k] = (coef_c * disp[k-1] + coef_d * veloc[k-1] +
                        coef_f * acc[k])
        # viscous damping energy over mass
        edoverm = integrate(self.const_c * veloc**2, self.dt, 0.)
        found = 0
        if len(edoverm) > 0:
            edmax = np.max(np.abs(edoverm))
            eim = edoverm / edmax if edmax > 0 else edoverm
            pim = differentiate(eim, self.dt, self.diff_order)
            lower_mode = ArrayStats(pim).get_modal_min(self.num_bins)
            above = np.flatnonzero(pim > lower_mode)
            peak = int(above[0]) if len(above) else 0
            # last zero crossing before the peak
            for k in range(peak, 0, -1):
                if acc[k] * acc[k-1] < 0:
                    found = k - 1
                    break
        self.event_start = found
        return self.event_start

    def apply_buffer(self, buffer):
        """Move the onset back by ``buffer`` seconds, clamping at 0."""
        self.buffer = buffer
        self.buffered_start = max(
            0, self.event_start - int(round(buffer / self.dt)))
        return self.buffered_start


class EventOnsetProcess():
    """
    Filter a copy of the record and pick the event onset.

    :param lowcut: band-pass low corner (Hz)
    :type lowcut: float
    :param highcut: band-pass high corner (Hz)
    :type highcut: float
    :param taper_length: taper length (s)
    :type taper_length: float
    :param nroll: filter roll-off
    :type nroll: int
    :param buffer: time buffer subtracted from the pick (s)
    :type buffer: float
    """

    def __init__(self, lowcut, highcut, taper_length, nroll, buffer):
        self.lowcut = lowcut
        self.highcut = highcut
        self.taper_length = taper_length
        self.nroll = nroll
        self.buffer = buffer
        self.pick_index = 0
        self.start_index = 0
        self.taper_used = 0.

    def find_event_onset(self, acc, dt, method=EventOnsetType.PWD):
        """
        Find the event onset. The input array is filtered in place.

        :param acc: acceleration
        :type acc: :class:`numpy.ndarray`
        :param dt: sampling interval (s)
        :type dt: float
        :param method: picking method
        :type method: :class:`~smproc.smp_constants.EventOnsetType`

        :raises SmProcessingError: if the band-pass parameters are invalid
        """
        remove_linear_trend(acc, dt)
        bpfilter = ButterworthFilter()
        if not bpfilter.calculate_coefficients(
                self.lowcut, self.highcut, dt, self.nroll, True):
            raise SmProcessingError('Invalid bandpass filter input parameters')
        bpfilter.apply_filter(acc, self.taper_length,
                              int(self.taper_length * dt))
        self.taper_used = bpfilter.taper_length
        if method == EventOnsetType.PWD:
            picker = EventOnsetDetection(dt)
            self.pick_index = picker.find_event_onset(acc)
            self.start_index = picker.apply_buffer(self.buffer)
        else:
            picker = AICEventDetect()
            self.pick_index = picker.calculate_index(acc, 'topeak')
            self.start_index = picker.apply_buffer(self.buffer, dt)
        logger.debug(
            f'{method.value} pick at sample {self.pick_index}, '
            f'start at sample {self.start_index}')
