# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Selection of the band-pass filter corners.

Corners are selected, in order of preference, from a station table, from
the intersection of the signal and pre-event noise Fourier amplitude
spectra (FAS), or from a magnitude and sampling rate table.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import logging
import numpy as np
from .smp_array_ops import EMPTY, find_closest_freq, make_freq_array
from .smp_constants import MagnitudeType
from .smp_fft import calculate_fft, normalize_mags
logger = logging.getLogger(__name__.rsplit('.', maxsplit=1)[-1])

EPSILON = 0.001
# characteristic frequency for the high corner search
FC = 20.0
# search range for the low corner
LP_UPPERLIM = 1.0
LP_LOWERLIM = 0.1
MID_MAGNITUDE = 3.5
HIGH_MAGNITUDE = 5.5
LOW_SAMPLING_RATE = 50


def smooth_fas(fas):
    """
    Smooth a Fourier amplitude spectrum with a Konno-Ohmachi window.

    The window has bandwidth coefficient 20 and 39 points.

    :param fas: Fourier amplitude spectrum
    :type fas: :class:`numpy.ndarray`
    :return: the smoothed spectrum, with the same length
    :rtype: :class:`numpy.ndarray`
    """
    if fas is None or len(fas) == 0:
        return EMPTY.copy()
    bcoef = 20
    window = 39
    halfw = 20
    logcalc = bcoef * np.log10(np.arange(1, window + 1) / halfw)
    weight = np.zeros(window)
    nonzero = np.abs(logcalc) >= 5 * np.spacing(np.abs(logcalc))
    weight[nonzero] = (np.sin(logcalc[nonzero]) / logcalc[nonzero])**4
    weight[halfw-1] = 1.
    weight /= weight.sum()
    convolved = np.convolve(np.asarray(fas, float), weight, mode='full')
    return convolved[halfw-1:halfw-1+len(fas)]


def find_intersection(x1, y1, x2, y2):
    """
    Find the intersections of two polylines.

    :param x1: x values of the first curve
    :type x1: :class:`numpy.ndarray`
    :param y1: y values of the first curve
    :type y1: :class:`numpy.ndarray`
    :param x2: x values of the second curve
    :type x2: :class:`numpy.ndarray`
    :param y2: y values of the second curve
    :type y2: :class:`numpy.ndarray`
    :return: a 2xN array with the x values in row 0 and the y values in
        row 1; a 2x2 array of zeros if no intersection is found or the
        input curves have less than 4 points
    :rtype: :class:`numpy.ndarray`
    """
    for arr in (x1, y1, x2, y2):
        if arr is None or len(arr) < 4:
            return np.zeros((2, 2))
    x1, y1, x2, y2 = (np.asarray(a, float) for a in (x1, y1, x2, y2))
    dx1, dy1, dx2, dy2 = (np.diff(a) for a in (x1, y1, x2, y2))
    s1 = dx1 * y1[:-1] - dy1 * x1[:-1]
    s2 = dx2 * y2[:-1] - dy2 * x2[:-1]
    # segments of curve 2 crossing the lines through segments of curve 1
    arg = np.outer(dx1, y2) - np.outer(dy1, x2)
    c1 = (arg[:, :-1] - s1[:, None]) * (arg[:, 1:] - s1[:, None]) <= 0
    # segments of curve 1 crossing the lines through segments of curve 2
    arg = (np.outer(y1, dx2) - np.outer(x1, dy2)).T
    c2 = (arg[:, :-1] - s2[:, None]) * (arg[:, 1:] - s2[:, None]) <= 0
    rows, cols = np.nonzero(c1 & c2.T)
    if len(rows) == 0:
        return np.zeros((2, 2))
    result = np.zeros((2, len(rows)))
    found = set()
    for k, (i, j) in enumerate(zip(rows, cols)):
        det = dy2[j] * dx1[i] - dy1[i] * dx2[j]
        if abs(det) <= 5 * np.spacing(abs(det)):
            continue
        xval = (dx2[j] * s1[i] - dx1[i] * s2[j]) / det
        # duplicated x values are left to zero
        if xval in found:
            continue
        found.add(xval)
        result[0, k] = xval
        result[1, k] = (dy2[j] * s1[i] - dy1[i] * s2[j]) / det
    return result


class FilterCutOffThresholds():
    """Band-pass corner selection for one record."""

    def __init__(self):
        self.magnitude = 0.
        self.f1 = 0.
        self.f2 = 0.

    def select_magnitude(self, moment, local, surface, other, no_value):
        """
        Select the magnitude used for corner selection.

        Preference is given to moment, local, surface and other magnitude,
        in this order. A magnitude is not usable if it is negative or
        equal to ``no_value``.

        :return: the selected magnitude type, ``INVALID`` if none is usable
        :rtype: :class:`~smproc.smp_constants.MagnitudeType`
        """
        self.magnitude = 0.
        candidates = (
            (MagnitudeType.MOMENT, moment),
            (MagnitudeType.M_LOCAL, local),
            (MagnitudeType.SURFACE, surface),
            (MagnitudeType.M_OTHER, other),
        )
        for magtype, value in candidates:
            if abs(value - no_value) < EPSILON or value < 0:
                continue
            self.magnitude = value
            return magtype
        return MagnitudeType.INVALID

    def check_table_corners(self, sncl, corner_table):
        """
        Look for the station in the filter corner table.

        :param sncl: station id
        :type sncl: str
        :param corner_table: station corner table or None
        :type corner_table:
            :class:`~smproc.smp_filter_corners.FilterCornerTable`
        :return: True if corners were found for the station
        :rtype: bool
        """
        if not corner_table or sncl not in corner_table:
            return False
        self.f1, self.f2 = corner_table[sncl]
        return True

    def select_mag_thresholds(self, magtype, magnitude, sample_rate):
        """
        Select corners from the magnitude and the original sampling rate.

        :param magtype: magnitude type
        :type magtype: :class:`~smproc.smp_constants.MagnitudeType`
        :param magnitude: magnitude value, used when :meth:`select_magnitude`
            was not called
        :type magnitude: float
        :param sample_rate: original sampling rate (samples/s)
        :type sample_rate: float
        :return: ``magtype``, or ``LOWSPS`` if the sampling rate is too low
        :rtype: :class:`~smproc.smp_constants.MagnitudeType`
        """
        if magtype not in (MagnitudeType.MOMENT, MagnitudeType.SURFACE,
                           MagnitudeType.M_LOCAL, MagnitudeType.M_OTHER):
            self.f1 = self.f2 = 0.
            return magtype
        if not self.magnitude:
            self.magnitude = magnitude
        mag = self.magnitude
        if mag > HIGH_MAGNITUDE or abs(mag - HIGH_MAGNITUDE) < EPSILON:
            self.f1 = 0.1
        elif mag > MID_MAGNITUDE or abs(mag - MID_MAGNITUDE) < EPSILON:
            self.f1 = 0.3
        else:
            self.f1 = 0.5
        if sample_rate >= LOW_SAMPLING_RATE:
            self.f2 = min(40.0, sample_rate / 2. - sample_rate / 10.)
        else:
            magtype = MagnitudeType.LOWSPS
            self.f1 = self.f2 = 0.
        return magtype

    def find_freq_thresholds(self, array, event_onset, sample_rate,
                             orig_sample_rate):
        """
        Select corners from the signal and pre-event noise spectra.

        The high corner is the first intersection above 20 Hz (80% of the
        Nyquist frequency if none is found), the low corner the first
        intersection above 0.1 Hz, searched between 0.1 and 1 Hz (0.1 Hz
        if none is found).

        :param array: acceleration
        :type array: :class:`numpy.ndarray`
        :param event_onset: event onset index
        :type event_onset: int
        :param sample_rate: current sampling rate (samples/s)
        :type sample_rate: float
        :param orig_sample_rate: sampling rate before resampling
        :type orig_sample_rate: float
        """
        if (array is None or len(array) == 0 or event_onset < 1 or
                event_onset > len(array) - 2):
            self.f1 = self.f2 = 0.
            return
        dt = 1. / sample_rate
        nyquist = 0.5 * orig_sample_rate
        noise_fas = normalize_mags(calculate_fft(array[:event_onset]),
                                   event_onset)
        noise_smooth = smooth_fas(noise_fas)
        noise_freq = make_freq_array(dt, 2 * len(noise_fas))
        signal_fas = normalize_mags(calculate_fft(array), len(array))
        signal_smooth = smooth_fas(signal_fas)
        signal_freq = make_freq_array(dt, 2 * len(signal_fas))

        def _intersections(fmin, fmax):
            s_lo = find_closest_freq(signal_freq, fmin)
            s_hi = find_closest_freq(signal_freq, fmax)
            n_lo = find_closest_freq(noise_freq, fmin)
            n_hi = find_closest_freq(noise_freq, fmax)
            points = find_intersection(
                signal_freq[s_lo:s_hi], signal_smooth[s_lo:s_hi],
                noise_freq[n_lo:n_hi], noise_smooth[n_lo:n_hi])
            return np.sort(points[0])

        self.f2 = 0.8 * nyquist
        above = [x for x in _intersections(FC, nyquist) if x > FC]
        if above:
            self.f2 = above[0]
        self.f1 = LP_LOWERLIM
        above = [
            x for x in _intersections(LP_LOWERLIM, LP_UPPERLIM)
            if x > LP_LOWERLIM]
        if above:
            self.f1 = above[0]
        logger.debug(
            f'FAS corners: {self.f1:.3f} Hz, {self.f2:.3f} Hz')
