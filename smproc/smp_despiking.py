# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Spike detection and removal.

Candidate spikes are the samples where the absolute derivative exceeds the
modal minimum of its histogram. Each candidate is checked against the mean
and standard deviation of a window around it and, if it is an outlier,
replaced by linear interpolation of its neighbours.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import logging
import numpy as np
from .smp_array_ops import differentiate, find_standard_dev, interpolate
from .smp_array_stats import ArrayStats
from .smp_constants import DEFAULT_DIFFORDER
logger = logging.getLogger(__name__.rsplit('.', maxsplit=1)[-1])


class Despiking():
    """
    Despiking of a data array.

    :param num_std: number of standard deviations above which a sample is
        considered a spike
    :type num_std: float
    """

    def __init__(self, num_std):
        self.num_std = num_std
        self.num_passes = 2
        self.num_bins = 4
        self.neighbors = 5
        self.window_size = 25
        self.spike_count = 0
        self.first_spike_index = -1
        self.last_spike_index = -1

    def remove_spikes(self, array, dt):
        """
        Find and fix spikes in the array, in place.

        :param array: input array
        :type array: :class:`numpy.ndarray`
        :param dt: sampling interval (s)
        :type dt: float
        :return: True if at least one spike was fixed
        :rtype: bool
        """
        self.spike_count = 0
        self.first_spike_index = self.last_spike_index = -1
        if array is None or len(array) == 0:
            return False
        for _ in range(self.num_passes):
            diffarr = np.abs(differentiate(array, dt, DEFAULT_DIFFORDER))
            threshold = ArrayStats(diffarr).get_modal_min(self.num_bins)
            for idx in np.flatnonzero(diffarr > threshold):
                fixed = self.spike_fix(
                    array, int(idx), self.neighbors, self.window_size)
                if fixed:
                    if self.first_spike_index < 0:
                        self.first_spike_index = int(idx)
                    self.last_spike_index = max(
                        self.last_spike_index, int(idx))
                self.spike_count += fixed
        if self.spike_count:
            logger.debug(
                f'{self.spike_count} spike(s) fixed between samples '
                f'{self.first_spike_index} and {self.last_spike_index}')
        return self.spike_count > 0

    def spike_fix(self, array, index, neighbors, window_size):
        """
        Check a candidate spike and fix it, in place.

        :param array: input array
        :type array: :class:`numpy.ndarray`
        :param index: index of the candidate spike
        :type index: int
        :param neighbors: number of samples on each side used for
            interpolation
        :type neighbors: int
        :param window_size: length of the window used for the local
            statistics
        :type window_size: int
        :return: 1 if the sample was replaced, 0 otherwise
        :rtype: int
        """
        npts = len(array)
        halfwindow = window_size // 2
        # differentiation may shift the candidate by one sample
        if 0 < index < npts - 1:
            newmax = index
            for i in (index - 1, index + 1):
                if abs(array[i]) > abs(array[newmax]):
                    newmax = i
            index = newmax
        nwndw = 2 * neighbors
        if index <= nwndw:
            array[index] = array[index+1:index+1+nwndw].mean()
            return 1
        if index >= npts - nwndw:
            array[index] = array[index-nwndw:index].mean()
            return 1
        if index <= halfwindow:
            halfwindow = index
        elif index >= npts - halfwindow:
            halfwindow = (npts - index) // 2
        if neighbors > halfwindow:
            neighbors = halfwindow - 1
        subset = np.concatenate((
            array[index-halfwindow:index],
            array[index+1:index+1+halfwindow]))
        submean = ArrayStats(subset).mean
        substd = find_standard_dev(subset, population=False)
        value = array[index]
        if (value < submean + substd * self.num_std and
                value > submean - substd * self.num_std):
            return 0
        before = np.arange(index - neighbors - 1, index - 1)
        after = np.arange(index + 2, index + 2 + neighbors)
        known_x = np.concatenate((before, after))
        new_x = np.array([index - 1, index, index + 1])
        array[index-1:index+2] = interpolate(
            known_x, array[known_x], new_x, 1)
        return 1
