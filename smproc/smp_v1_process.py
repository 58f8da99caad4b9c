# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
V1 processing: conversion of raw counts to acceleration.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import logging
from .smp_array_ops import counts_to_physical_values, find_and_remove_mean
from .smp_array_stats import ArrayStats
from .smp_constants import (
    CMSQSECN, FROM_G_CONVERSION, MSEC_TO_SEC,
    RECORDER_LSB, SENSOR_SENSITIVITY, DELTA_T, MEAN_ZERO, AVG_VAL,
    PEAK_VAL, PEAK_VAL_TIME, SERIES_LENGTH)
from .smp_despiking import Despiking
from .smp_errors import SmProcessingError
from .smp_trace import get_smproc_header, make_trace
from . import __version__
logger = logging.getLogger(__name__.rsplit('.', maxsplit=1)[-1])

MICRO_TO_VOLT = 1.0e-6
EPSILON = 0.0001


def count_to_g(lsb, sensitivity):
    """Conversion factor from counts to g."""
    return lsb * MICRO_TO_VOLT / sensitivity


def count_to_cms(lsb, sensitivity, conversion=FROM_G_CONVERSION):
    """Conversion factor from counts to cm/s^2."""
    return count_to_g(lsb, sensitivity) * conversion


class V1Process():
    """
    Convert a V0 trace (counts) into a V1 trace (acceleration).

    :param trace: V0 trace; the real header must provide the recorder
        least significant bit, the sensor sensitivity and the sampling
        interval
    :type trace: :class:`~obspy.core.trace.Trace`
    :param config: processing configuration
    :type config: :class:`~smproc.config.Config`

    :raises SmProcessingError: if calibration values are not valid
    """

    def __init__(self, trace, config):
        self.v0_trace = trace
        self.config = config
        header = get_smproc_header(trace)
        nodata = header.no_real_value
        real_header = header.real_header
        self.lsb = real_header[RECORDER_LSB]
        self.sensitivity = real_header[SENSOR_SENSITIVITY]
        if abs(self.lsb) < EPSILON or abs(self.lsb - nodata) < EPSILON:
            raise SmProcessingError(
                f'{trace.id}: Real header #{RECORDER_LSB + 1}, recorder '
                f'least sig. bit, is invalid: {self.lsb}')
        if (abs(self.sensitivity) < EPSILON or
                abs(self.sensitivity - nodata) < EPSILON):
            raise SmProcessingError(
                f'{trace.id}: Real header #{SENSOR_SENSITIVITY + 1}, sensor '
                f'sensitivity, is invalid: {self.sensitivity}')
        delta_t = real_header[DELTA_T]
        if abs(delta_t - nodata) < EPSILON or delta_t < 0:
            raise SmProcessingError(
                f'{trace.id}: Real header #{DELTA_T + 1}, delta t, is '
                f'invalid: {delta_t}')
        self.dt = delta_t * MSEC_TO_SEC
        self.data_unit_code = config.data_units_code
        self.data_units = config.data_units
        self.despike = config.despike_input
        self.despike_devs = config.despike_std_dev
        self.accel = None
        self.mean_to_zero = 0.
        self.avg_val = 0.
        self.peak_val = 0.
        self.peak_index = -1
        self.spike_count = 0
        self.processing_log = header.processing_log

    def process(self):
        """
        Run the V1 processing.

        :return: the V1 trace
        :rtype: :class:`~obspy.core.trace.Trace`
        """
        if self.data_unit_code == CMSQSECN:
            conv = count_to_cms(self.lsb, self.sensitivity)
        else:
            conv = count_to_g(self.lsb, self.sensitivity)
        self.accel = counts_to_physical_values(self.v0_trace.data, conv)
        log = self.processing_log.add_correction_type(__version__)
        if self.despike:
            despiking = Despiking(self.despike_devs)
            if despiking.remove_spikes(self.accel, self.dt):
                self.spike_count = despiking.spike_count
                log = log.add_spike_count(self.spike_count)
                logger.info(
                    f'{self.v0_trace.id}: {self.spike_count} spike(s) '
                    'removed')
        self.mean_to_zero = find_and_remove_mean(self.accel)
        stats = ArrayStats(self.accel)
        self.avg_val = stats.mean
        self.peak_val = stats.peak_val
        self.peak_index = stats.peak_index
        self.processing_log = log
        trace = make_trace(
            self.v0_trace, self.accel,
            units_code=self.data_unit_code,
            units=self.data_units,
            processing_log=log)
        real_header = trace.stats.smproc.real_header
        real_header[MEAN_ZERO] = self.mean_to_zero
        real_header[AVG_VAL] = self.avg_val
        real_header[PEAK_VAL] = self.peak_val
        real_header[PEAK_VAL_TIME] = self.peak_index * self.dt
        real_header[SERIES_LENGTH] = len(self.accel) * self.dt
        logger.debug(
            f'{trace.id}: V1 peak {self.peak_val:.6g} {self.data_units} '
            f'at sample {self.peak_index}')
        return trace
