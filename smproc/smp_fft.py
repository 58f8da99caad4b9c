# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Fourier transform helpers.

Arrays are zero padded to the next power of two before the transform.
Integration and differentiation in the frequency domain divide or multiply
the centred spectrum by ``i*omega``.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import numpy as np
from .smp_array_ops import EMPTY, apply_cosine_taper, remove_linear_trend
from .smp_constants import OPS_EPSILON


def power2_length(npts):
    """Return the smallest power of two not smaller than ``npts`` (min 2)."""
    powlength = 2
    while powlength < npts:
        powlength *= 2
    return powlength


def pad_array(array, front=False):
    """
    Zero pad the array to a power-of-two length.

    :param array: input array
    :type array: :class:`numpy.ndarray`
    :param front: if True, the zeros are put at the beginning
    :type front: bool
    :return: the padded array
    :rtype: :class:`numpy.ndarray`
    """
    npts = len(array)
    npad = power2_length(npts) - npts
    pad = (npad, 0) if front else (0, npad)
    return np.pad(np.asarray(array, float), pad)


def calculate_fft_complex(array, front=False):
    """Complex spectrum of the power-of-two padded array."""
    return np.fft.fft(pad_array(array, front))


def calculate_fft(array):
    """
    Magnitude spectrum of the padded array.

    :param array: input array
    :type array: :class:`numpy.ndarray`
    :return: ``n/2+1`` magnitudes, ``n`` being the padded length
    :rtype: :class:`numpy.ndarray`
    """
    spectrum = calculate_fft_complex(array)
    return np.abs(spectrum[:len(spectrum) // 2 + 1])


def normalize_mags(mags, npts):
    """Divide the magnitudes by the original number of samples."""
    if mags is None or len(mags) == 0 or npts <= 0:
        return mags
    return mags / npts


def inverse_fft(spectrum):
    """Real part of the inverse transform of the padded spectrum."""
    padded = np.pad(spectrum, (0, power2_length(len(spectrum)) -
                               len(spectrum)))
    return np.fft.ifft(padded).real


def shift_forward(array):
    """Move the upper half of the array in front of the lower half."""
    npts = len(array)
    half = npts // 2 if npts % 2 == 0 else npts // 2 + 1
    return np.concatenate((array[half:], array[:half]))


def shift_back(array):
    """Undo :func:`shift_forward`."""
    half = len(array) // 2
    return np.concatenate((array[half:], array[:half]))


def _omega(dt, npts):
    return 2 * np.pi / (dt * npts) * (np.arange(npts) - npts // 2)


def fft_integrate(array, dt):
    """
    Integrate in the frequency domain.

    The linear trend of the result is removed.

    :param array: input array
    :type array: :class:`numpy.ndarray`
    :param dt: sampling interval (s)
    :type dt: float
    :return: the integral, with the same length as the input
    :rtype: :class:`numpy.ndarray`
    """
    if array is None or len(array) == 0 or abs(dt) < OPS_EPSILON:
        return EMPTY.copy()
    spectrum = shift_forward(calculate_fft_complex(array))
    omega = _omega(dt, len(spectrum))
    znew = np.zeros_like(spectrum)
    nonzero = omega != 0
    znew[nonzero] = spectrum[nonzero] / (1j * omega[nonzero])
    result = inverse_fft(shift_back(znew))[:len(array)]
    remove_linear_trend(result, dt)
    return result


def fft_differentiate(array, dt, taper_length):
    """
    Differentiate in the frequency domain.

    The input array is tapered in place before the transform.

    :param array: input array
    :type array: :class:`numpy.ndarray`
    :param dt: sampling interval (s)
    :type dt: float
    :param taper_length: cosine taper length, in samples
    :type taper_length: int
    :return: the derivative, with the same length as the input
    :rtype: :class:`numpy.ndarray`
    """
    if array is None or len(array) == 0 or abs(dt) < OPS_EPSILON:
        return EMPTY.copy()
    apply_cosine_taper(array, taper_length, taper_length)
    spectrum = shift_forward(calculate_fft_complex(array))
    omega = _omega(dt, len(spectrum))
    znew = spectrum * (1j * omega)
    return inverse_fft(shift_back(znew))[:len(array)]
