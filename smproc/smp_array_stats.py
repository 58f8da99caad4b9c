# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Basic statistics on a data array: mean, extrema, peak and histogram modes.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import numpy as np
from .smp_constants import MIN_VALUE, MAX_VALUE


class ArrayStats():
    """
    Statistics of a data array.

    Arrays with less than two samples are not analysed: the mean, the
    extrema and the peak are set to ``MIN_VALUE`` and indices to -1.

    :param array: input array
    :type array: :class:`numpy.ndarray`
    """

    def __init__(self, array):
        self.array = np.asarray(array if array is not None else [], float)
        self.length = len(self.array)
        self.mean = MIN_VALUE
        self.max_val = MIN_VALUE
        self.min_val = MAX_VALUE
        self.peak_val = MIN_VALUE
        self.max_index = self.min_index = self.peak_index = -1
        self.range = 0.
        self.hist_step = 0.
        if self.length < 2:
            return
        self.mean = self.array.mean()
        self.max_index = int(np.argmax(self.array))
        self.min_index = int(np.argmin(self.array))
        self.max_val = self.array[self.max_index]
        self.min_val = self.array[self.min_index]
        self.range = self.max_val - self.min_val
        # ties go to the minimum
        if abs(self.max_val) > abs(self.min_val):
            self.peak_val = self.max_val
            self.peak_index = self.max_index
        else:
            self.peak_val = self.min_val
            self.peak_index = self.min_index

    def make_histogram(self, nbins):
        """
        Count the samples falling in each of ``nbins`` equal bins.

        Bins are closed on the left and open on the right, so the
        maximum value of the array is not counted.

        :param nbins: number of bins
        :type nbins: int
        :return: bin counts
        :rtype: :class:`numpy.ndarray`
        """
        if nbins <= 0 or self.length == 0:
            return np.zeros(0, dtype=int)
        self.hist_step = self.range / nbins
        hist = np.zeros(nbins, dtype=int)
        if self.hist_step == 0:
            return hist
        idx = np.floor((self.array - self.min_val) / self.hist_step)
        idx = idx[(idx >= 0) & (idx < nbins)].astype(int)
        np.add.at(hist, idx, 1)
        return hist

    def get_modal_min_max(self, nbins):
        """
        Return the centre values of the most populated bin in the lower
        and in the upper half of the histogram.

        :param nbins: number of bins
        :type nbins: int
        :return: (modal minimum, modal maximum)
        :rtype: tuple
        """
        hist = self.make_histogram(nbins)
        if len(hist) == 0:
            return MIN_VALUE, MIN_VALUE
        nonzero = np.flatnonzero(hist)
        startbin = nonzero[0] if len(nonzero) else 0
        stopbin = nonzero[-1] if len(nonzero) else 0
        step = self.hist_step
        mode = 0
        modeindex = -1
        for i in range(startbin, (stopbin - startbin) // 2 + 1):
            if hist[i] >= mode:
                mode = hist[i]
                modeindex = i
        modal_min = self.min_val + step * modeindex + step * 0.5
        mode = 0
        modeindex = -1
        midbin = startbin + (stopbin - startbin) // 2
        for i in range(midbin + 1, stopbin + 1):
            if hist[i] >= mode:
                mode = hist[i]
                modeindex = i
        modal_max = self.min_val + step * modeindex + step * 0.5
        return modal_min, modal_max

    def get_modal_min(self, nbins):
        """Modal value of the lower half of the histogram."""
        return self.get_modal_min_max(nbins)[0]

    def get_modal_max(self, nbins):
        """Modal value of the upper half of the histogram."""
        return self.get_modal_min_max(nbins)[1]
