# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Band-limited resampling and decimation in the frequency domain.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import logging
import math
import numpy as np
from .smp_constants import SAMPLING_LIMIT
from .smp_errors import SmProcessingError
from .smp_fft import (
    calculate_fft_complex, inverse_fft, power2_length,
    shift_back, shift_forward)
logger = logging.getLogger(__name__.rsplit('.', maxsplit=1)[-1])


class Resampling():
    """
    Up-sampling of records recorded below a target sampling rate.

    :param target_rate: minimum sampling rate (samples/s)
    :type target_rate: int
    """

    def __init__(self, target_rate=SAMPLING_LIMIT):
        self.target_rate = target_rate
        self.factor = 0
        self.new_rate = -1
        self.orig_rate = 0

    def needs_resampling(self, rate):
        """True if ``rate`` is below the target rate."""
        return rate < self.target_rate

    def calc_new_sampling_rate(self, rate):
        """
        Compute the resampling factor and the new sampling rate.

        The new rate is the smallest integer multiple of ``rate`` which
        is not lower than the target rate.

        :param rate: original sampling rate (samples/s)
        :type rate: int
        :return: the new rate, -1 if ``rate`` is not positive or does not
            need resampling
        :rtype: int
        """
        self.new_rate = -1
        if rate > 0 and self.needs_resampling(rate):
            self.factor = int(math.ceil(self.target_rate / rate))
            self.new_rate = rate * self.factor
        return self.new_rate

    def resample_array(self, array, rate):
        """
        Resample the array by inserting zeros in its spectrum.

        :param array: input array
        :type array: :class:`numpy.ndarray`
        :param rate: original sampling rate (samples/s)
        :type rate: int
        :return: the resampled array, ``factor`` times longer
        :rtype: :class:`numpy.ndarray`

        :raises SmProcessingError: if ``rate`` cannot be resampled
        """
        self.orig_rate = rate
        if array is None or len(array) == 0:
            raise SmProcessingError('Invalid resampling input array')
        if self.calc_new_sampling_rate(rate) < 0:
            raise SmProcessingError(f'Invalid sampling rate of {rate}')
        factor = self.factor
        npts = len(array)
        fftpadlen = power2_length(npts)
        zlen = int(math.ceil((fftpadlen + 1) / 2))
        newlen = npts * factor
        padlen = npts * (factor - 1)
        complexlen = power2_length(padlen + fftpadlen)
        spectrum = calculate_fft_complex(array, front=True)
        zp = np.concatenate((
            spectrum[:zlen],
            np.zeros(complexlen - fftpadlen, dtype=complex),
            spectrum[zlen:]))
        # Nyquist correction
        zp[zlen-1] /= 2.
        zp[zlen-1+padlen] = zp[zlen-1]
        resampled = inverse_fft(zp)
        logger.debug(
            f'Resampled {npts} samples from {rate} to {self.new_rate} '
            'samples/s')
        return resampled[complexlen-newlen:] * factor


def decimate_array(array, factor):
    """
    Decimate the array by truncating its spectrum.

    The array is zero padded at the end to ``factor`` times a power of two,
    so that output sample ``k`` falls on input sample ``k*factor``.

    :param array: input array
    :type array: :class:`numpy.ndarray`
    :param factor: decimation factor
    :type factor: int
    :return: the decimated array, ``ceil(len(array)/factor)`` samples long
    :rtype: :class:`numpy.ndarray`

    :raises SmProcessingError: on empty input or non positive factor
    """
    if array is None or len(array) == 0:
        raise SmProcessingError('Invalid decimation input array')
    if factor <= 0:
        raise SmProcessingError(f'Invalid decimation factor {factor}')
    npts = len(array)
    outlen = -(-npts // factor)
    shortlen = power2_length(outlen)
    padded = np.pad(np.asarray(array, float), (0, shortlen * factor - npts))
    spectrum = shift_forward(np.fft.fft(padded))
    nsamp = (len(spectrum) - shortlen) // 2
    shortened = spectrum[nsamp:nsamp+shortlen] / factor
    return inverse_fft(shift_back(shortened))[:outlen]
