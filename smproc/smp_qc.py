# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Quality control of velocity and displacement.

The initial velocity is the mean of the samples up to the last zero
crossing of the first QC window; residual velocity and displacement are
the mean of the samples from the first zero crossing of the last window.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import logging
from .smp_array_ops import find_subset_mean, find_zero_crossing
from .smp_constants import DEFAULT_QC_VALUE
logger = logging.getLogger(__name__.rsplit('.', maxsplit=1)[-1])


class QCcheck():
    """
    Velocity and displacement QC checks.

    :param config: processing configuration; thresholds are read from
        ``qc_initial_velocity``, ``qc_residual_velocity`` and
        ``qc_residual_displacement``
    :type config: :class:`~smproc.config.Config` or dict
    """

    def __init__(self, config=None):
        self.config = config if config is not None else {}
        self.qc_vel_init = -1.
        self.qc_vel_res = -1.
        self.qc_dis_res = -1.
        self.window = 0
        self.lowcut = 0.
        self.event_index = 0
        self.vel_start = 0.
        self.vel_end = 0.
        self.dis_end = 0.

    def _qc_value(self, key):
        value = self.config.get(key)
        return DEFAULT_QC_VALUE if value is None else float(value)

    def validate_qc_values(self):
        """
        Parse the QC thresholds from the configuration.

        Missing values take the default (0.1).

        :return: False if a threshold cannot be converted to a number
        :rtype: bool
        """
        try:
            self.qc_vel_init = self._qc_value('qc_initial_velocity')
            self.qc_vel_res = self._qc_value('qc_residual_velocity')
            self.qc_dis_res = self._qc_value('qc_residual_displacement')
        except (TypeError, ValueError):
            logger.warning('Invalid QC threshold in configuration')
            return False
        return True

    def find_window(self, lowcut, sample_rate, event_index,
                    series_length=None):
        """
        Compute the QC window length, in samples.

        The window is one period of the low corner frequency, but not
        shorter than the pre-event part of the record.

        :param lowcut: band-pass low corner (Hz)
        :type lowcut: float
        :param sample_rate: sampling rate (samples/s)
        :type sample_rate: float
        :param event_index: event onset index
        :type event_index: int
        :param series_length: if given, maximum window length
        :type series_length: int
        :return: the window length
        :rtype: int
        """
        self.lowcut = lowcut
        self.event_index = event_index
        lclength = int(round(1. / lowcut) * sample_rate)
        self.window = max(event_index, lclength)
        if series_length is not None:
            self.window = min(self.window, series_length)
        return self.window

    def qc_velocity(self, velocity):
        """
        Check initial and residual velocity.

        :param velocity: velocity
        :type velocity: :class:`numpy.ndarray`
        :return: True if both values are within the thresholds
        :rtype: bool
        """
        npts = len(velocity)
        window = self.window
        self.vel_start = velocity[0]
        self.vel_end = velocity[npts-1]
        if window > 0:
            start = find_zero_crossing(velocity, window, 0)
            if start > 0:
                self.vel_start = find_subset_mean(velocity, 0, start + 1)
            end = find_zero_crossing(velocity, npts - window - 1, npts - 1)
            if end > 0:
                self.vel_end = find_subset_mean(velocity, end, npts)
        return (abs(self.vel_start) <= self.qc_vel_init and
                abs(self.vel_end) <= self.qc_vel_res)

    def qc_displacement(self, displacement):
        """
        Check residual displacement.

        :param displacement: displacement
        :type displacement: :class:`numpy.ndarray`
        :return: True if the residual displacement is within the threshold
        :rtype: bool
        """
        npts = len(displacement)
        window = self.window
        self.dis_end = displacement[npts-1]
        if window > 0:
            end = find_zero_crossing(
                displacement, npts - window - 1, npts - 1)
            if end > 0:
                self.dis_end = find_subset_mean(displacement, end, npts)
        return abs(self.dis_end) <= self.qc_dis_res
