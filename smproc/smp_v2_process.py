# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
V2 processing: corrected acceleration, velocity and displacement.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import logging
import numpy as np
from .smp_array_ops import calc_signal_to_noise_ratio, convert_array_units
from .smp_array_stats import ArrayStats
from .smp_baseline import ABC, FilterAndIntegrateProcess, TrendRemovalProcess
from .smp_computed_params import ComputedParams
from .smp_constants import (
    V2Status, MagnitudeType, EventOnsetType, BaselineType, CorrectionOrder,
    V2DataType, CMSQSECN, CMSQSECT, CMSECN, CMSECT, CMN, CMT, GLN,
    FROM_G_CONVERSION, MSEC_TO_SEC, DEFAULT_NUM_ROLL, V3_SAMPLING_RATES,
    DELTA_T, MOMENT_MAGNITUDE, LOCAL_MAGNITUDE, SURFACE_MAGNITUDE,
    OTHER_MAGNITUDE, AVG_VAL, PEAK_VAL, PEAK_VAL_TIME, SERIES_LENGTH)
from .smp_errors import SmProcessingError
from .smp_event_onset import EventOnsetProcess
from .smp_filter_thresholds import FilterCutOffThresholds
from .smp_qc import QCcheck
from .smp_resampling import Resampling, decimate_array
from .smp_trace import get_smproc_header, make_trace, sncl_code
logger = logging.getLogger(__name__.rsplit('.', maxsplit=1)[-1])

EPSILON = 0.000001

# units code and name of each V2 product
V2_UNITS = {
    V2DataType.ACC: (CMSQSECN, CMSQSECT),
    V2DataType.VEL: (CMSECN, CMSECT),
    V2DataType.DIS: (CMN, CMT),
}

# acceleration correction order for each velocity polynomial degree
ABC_ORDERS = {
    1: CorrectionOrder.MEAN,
    2: CorrectionOrder.ORDER1,
    3: CorrectionOrder.ORDER2,
}


class V2Process():
    """
    Correct a V1 acceleration trace and integrate it to velocity and
    displacement.

    After :meth:`process`, the ``acc``, ``vel`` and ``dis`` attributes
    hold the V2 traces, when the final status has products.

    :param trace: V1 trace
    :type trace: :class:`~obspy.core.trace.Trace`
    :param config: processing configuration
    :type config: :class:`~smproc.config.Config`
    :param corner_table: station filter corner table
    :type corner_table:
        :class:`~smproc.smp_filter_corners.FilterCornerTable`

    :raises SmProcessingError: if the sampling interval is not valid
    """

    def __init__(self, trace, config, corner_table=None):
        self.v1_trace = trace
        self.config = config
        self.corner_table = corner_table
        header = get_smproc_header(trace)
        self.no_real_value = header.no_real_value
        self.processing_log = header.processing_log
        real_header = header.real_header
        delta_t = real_header[DELTA_T]
        if abs(delta_t - self.no_real_value) < EPSILON or delta_t < 0:
            raise SmProcessingError(
                f'{trace.id}: Real header #{DELTA_T + 1}, delta t, is '
                f'invalid: {delta_t}')
        self.dt = delta_t * MSEC_TO_SEC
        self.sample_rate = 1. / self.dt if self.dt > 0 else 0.
        if not any(abs(rate - self.sample_rate) < EPSILON
                   for rate in V3_SAMPLING_RATES):
            raise SmProcessingError(
                f'{trace.id}: Real header #{DELTA_T + 1}, delta t value, '
                f'{delta_t} is out of expected range')
        self.orig_sample_rate = self.sample_rate
        self.mmag = real_header[MOMENT_MAGNITUDE]
        self.lmag = real_header[LOCAL_MAGNITUDE]
        self.smag = real_header[SURFACE_MAGNITUDE]
        self.omag = real_header[OTHER_MAGNITUDE]
        self.sncl = sncl_code(trace)
        self.status = V2Status.NOEVENT
        self.basetype = BaselineType.BESTFIT
        self.need_resampling = False
        self.sampling_factor = 0
        self.magnitude = 0.
        self.lowcut = 0.
        self.highcut = 0.
        self.snr = 0.
        self.pick_index = 0
        self.start_index = 0
        self.npts = 0
        self.accel = None
        self.velocity = None
        self.displacement = None
        self.padded_accel = None
        self.initial_vel = 0.
        self.initial_dis = 0.
        self.calculated_taper = 0.
        self.config_taper = 0.
        self.qc_valid = True
        self.qc_vel_initial = 0.
        self.qc_vel_residual = 0.
        self.qc_dis_residual = 0.
        self.abc_num_runs = 0
        self.abc_rank = 0
        self.strong_motion = False
        self.computed_params = None
        self.stats = {}
        self.acc = None
        self.vel = None
        self.dis = None
        self._read_config()

    def _read_config(self):
        config = self.config
        # units of the V1 trace, if known, take precedence
        self.data_unit_code = get_smproc_header(self.v1_trace).get(
            'units_code', config.data_units_code)
        self.default_lowcut = config.bp_filter_cutoff_low
        self.default_highcut = config.bp_filter_cutoff_high
        self.num_roll = config.num_roll
        self.taper_length = config.bp_taper_length
        self.buffer = config.event_onset_buffer
        self.sm_threshold = config.strong_motion_threshold
        self.snr_limit = config.signal_to_noise_ratio
        self.pga_check = config.pga_check
        self.pga_threshold = config.pga_threshold
        self.onset_method = (
            EventOnsetType.AIC if config.event_onset_method.upper() == 'AIC'
            else EventOnsetType.PWD)
        self.use_fft = config.use_fft
        self.use_fas = config.filter_corner_method.lower() == 'fas'
        self.decimate = config.decimate_resampled_output
        self.target_rate = config.resampling_target_rate

    def process(self):
        """
        Run the V2 processing.

        :return: the processing status
        :rtype: :class:`~smproc.smp_constants.V2Status`

        :raises SmProcessingError: if processing parameters are not valid
        """
        trace_id = self.v1_trace.id
        self.accel = self._prepare_accel()
        self.npts = len(self.accel)
        logger.debug(
            f'{trace_id}: V2 processing, {self.sample_rate:.1f} samples/sec, '
            f'{self.npts} samples')
        if not self._find_event_onset():
            return self._finish()
        if not self._find_corners():
            return self._finish()
        self._remove_trends()
        qcchecker = QCcheck(self.config)
        if not qcchecker.validate_qc_values():
            self.qc_valid = False
            logger.warning(
                f'{trace_id}: invalid QC thresholds: the record will fail QC')
        qcchecker.find_window(self.lowcut, self.sample_rate, self.start_index)
        if qcchecker.qc_velocity(self.velocity):
            self._filter_and_integrate(qcchecker)
        else:
            logger.info(
                f'{trace_id}: velocity QC failed (initial '
                f'{abs(qcchecker.vel_start):f}, limit '
                f'{qcchecker.qc_vel_init:f}; final '
                f'{abs(qcchecker.vel_end):f}, limit '
                f'{qcchecker.qc_vel_res:f}): adaptive baseline correction')
            if not self._adaptive_correction():
                return self._finish()
        if self.status == V2Status.GOOD and not self.qc_valid:
            self.status = V2Status.FAILQC
        if self.status == V2Status.FAILQC:
            logger.warning(
                f'{trace_id}: final QC failed (initial velocity '
                f'{self.qc_vel_initial:f}, final velocity '
                f'{self.qc_vel_residual:f}, final displacement '
                f'{self.qc_dis_residual:f})')
        if self.need_resampling and self.decimate:
            self._decimate()
        self._compute_stats()
        if self.status == V2Status.GOOD:
            self.computed_params = ComputedParams(
                self.accel, self.dt, self.sm_threshold)
            self.strong_motion = self.computed_params.calculate()
            if self.strong_motion:
                logger.info(f'{trace_id}: strong motion record')
        self._make_traces()
        return self._finish()

    def _finish(self):
        logger.info(f'{self.v1_trace.id}: V2 status {self.status.value}')
        return self.status

    def _prepare_accel(self):
        data = np.asarray(self.v1_trace.data, dtype=float)
        if self.data_unit_code == CMSQSECN:
            accel = data.copy()
        elif self.data_unit_code == GLN:
            accel = convert_array_units(data, FROM_G_CONVERSION)
        else:
            raise SmProcessingError(
                f'{self.v1_trace.id}: V1 file units are unsupported for '
                'processing')
        resampler = Resampling(self.target_rate)
        self.need_resampling = resampler.needs_resampling(
            int(self.sample_rate))
        if not self.need_resampling:
            return accel
        accel = resampler.resample_array(accel, int(self.sample_rate))
        self.sample_rate = resampler.new_rate
        self.sampling_factor = resampler.factor
        self.dt = 1. / self.sample_rate
        self.processing_log = self.processing_log.add_resampling(
            self.sample_rate)
        logger.info(
            f'{self.v1_trace.id}: resampled from '
            f'{self.orig_sample_rate:.1f} to {self.sample_rate:.1f} '
            'samples/sec')
        return accel

    def _find_event_onset(self):
        trace_id = self.v1_trace.id
        acc_copy = self.accel.copy()
        onset = EventOnsetProcess(
            self.default_lowcut, self.default_highcut, self.taper_length,
            self.num_roll, self.buffer)
        onset.find_event_onset(acc_copy, self.dt, self.onset_method)
        self.pick_index = onset.pick_index
        self.start_index = onset.start_index
        logger.debug(
            f'{trace_id}: {self.onset_method.value} pick index '
            f'{self.pick_index}, start index {self.start_index}, taper '
            f'{onset.taper_used / 2.:.3f}')
        if self.pick_index <= 0:
            self.status = V2Status.NOEVENT
            logger.warning(f'{trace_id}: no event onset found')
            return False
        self.processing_log = self.processing_log.add_event_onset(
            self.start_index * self.dt)
        self.snr = calc_signal_to_noise_ratio(acc_copy, self.pick_index)
        passed = self.snr >= self.snr_limit
        logger.debug(
            f'{trace_id}: acceleration SNR is {self.snr:.2f}, limit '
            f'{self.snr_limit:.2f}')
        if self.pga_check:
            peak = abs(ArrayStats(acc_copy).peak_val)
            logger.debug(
                f'{trace_id}: acceleration peak is {peak:.2f}, limit '
                f'{abs(self.pga_threshold):.2f}')
            passed = peak >= abs(self.pga_threshold)
        if not passed:
            self.status = V2Status.FAILINIT
            logger.warning(
                f'{trace_id}: signal to noise ratio or peak acceleration '
                'too low')
        return passed

    def _find_corners(self):
        trace_id = self.v1_trace.id
        thresholds = FilterCutOffThresholds()
        magtype = thresholds.select_magnitude(
            self.mmag, self.lmag, self.smag, self.omag, self.no_real_value)
        self.magnitude = thresholds.magnitude
        logger.debug(
            f'{trace_id}: earthquake magnitude is {self.magnitude:4.2f} '
            f'and M used is {magtype.value}')
        if self.use_fas:
            thresholds.find_freq_thresholds(
                self.accel, self.pick_index, self.sample_rate,
                self.orig_sample_rate)
        elif not thresholds.check_table_corners(
                self.sncl, self.corner_table):
            if magtype == MagnitudeType.INVALID:
                raise SmProcessingError(
                    f'{trace_id}: Earthquake magnitude real header values '
                    'not valid for filter corner selection.')
            magtype = thresholds.select_mag_thresholds(
                magtype, self.magnitude, self.orig_sample_rate)
            if magtype == MagnitudeType.LOWSPS:
                self.status = V2Status.FAILINIT
                logger.warning(
                    f'{trace_id}: original sample rate too low for '
                    f'earthquake magnitude {self.magnitude:4.2f} '
                    f'({self.orig_sample_rate:6.2f} samples/sec)')
                return False
        self.lowcut = thresholds.f1
        self.highcut = thresholds.f2
        logger.info(
            f'{trace_id}: acausal bandpass filter, lowcut '
            f'{self.lowcut:4.2f} Hz, highcut {self.highcut:4.2f} Hz')
        return True

    def _remove_trends(self):
        detrend = TrendRemovalProcess(self.start_index, self.use_fft)
        self.velocity = detrend.remove_trends(self.accel, self.dt)
        length = self.npts * self.dt
        log = self.processing_log
        if self.start_index > 0:
            log = log.add_baseline_step(
                0., self.start_index * self.dt, 0., length,
                V2DataType.ACC, BaselineType.BESTFIT, CorrectionOrder.MEAN)
            logger.debug(
                f'{self.v1_trace.id}: pre-event mean of '
                f'{detrend.pre_event_mean:10.6e} removed')
        order = (
            CorrectionOrder.ORDER1 if detrend.trend_removal_order == 1
            else CorrectionOrder.MEAN)
        self.processing_log = log.add_baseline_step(
            0., length, 0., length,
            V2DataType.ACC, BaselineType.BESTFIT, order)

    def _filter_and_integrate(self, qcchecker):
        filterint = FilterAndIntegrateProcess(
            self.lowcut, self.highcut, DEFAULT_NUM_ROLL, self.taper_length,
            self.start_index, self.use_fft)
        filterint.filter_and_integrate(self.accel, self.dt)
        self.padded_accel = filterint.padded_accel
        self.velocity = filterint.velocity
        self.displacement = filterint.displacement
        self.initial_vel = filterint.initial_vel
        self.initial_dis = filterint.initial_dis
        self.calculated_taper = filterint.calculated_taper
        self.config_taper = filterint.config_taper
        passed_vel = qcchecker.qc_velocity(self.velocity)
        passed_dis = qcchecker.qc_displacement(self.displacement)
        self.status = (
            V2Status.GOOD if passed_vel and passed_dis else V2Status.FAILQC)
        self.qc_vel_initial = abs(qcchecker.vel_start)
        self.qc_vel_residual = abs(qcchecker.vel_end)
        self.qc_dis_residual = abs(qcchecker.dis_end)

    def _adaptive_correction(self):
        trace_id = self.v1_trace.id
        abc = ABC(
            self.dt, self.velocity, self.accel, self.lowcut, self.highcut,
            self.num_roll, self.start_index, self.taper_length, self.config)
        self.status = abc.find_fit()
        if self.status == V2Status.NOABC:
            logger.warning(f'{trace_id}: adaptive baseline correction failed')
            return False
        self.basetype = BaselineType.ABC
        run = abc.params[abc.solution]
        self.abc_num_runs = len(abc.params)
        self.abc_rank = (
            abc.solution + 1 if self.status == V2Status.GOOD else 0)
        self.accel = abc.accel
        self.velocity = abc.velocity
        self.displacement = abc.displacement
        self.padded_accel = abc.padded_accel
        self.initial_vel = self.velocity[0]
        self.initial_dis = self.displacement[0]
        self.calculated_taper = abc.calculated_taper
        self.config_taper = abc.config_taper
        self.qc_dis_residual = run[1]
        self.qc_vel_initial = run[2]
        self.qc_vel_residual = run[3]
        break1 = int(run[4]) * self.dt
        break2 = int(run[5]) * self.dt
        length = len(self.velocity) * self.dt
        poly1 = int(run[6])
        poly3 = int(run[7])
        order1 = (
            CorrectionOrder.MEAN if poly1 == 1 else CorrectionOrder.ORDER1)
        self.processing_log = self.processing_log.add_baseline_step(
            0., break1, 0., break1, V2DataType.ACC, BaselineType.ABC,
            order1, 1
        ).add_baseline_step(
            break1, break2, break1, break2, V2DataType.ACC, BaselineType.ABC,
            CorrectionOrder.SPLINE, 2
        ).add_baseline_step(
            break2, length, break2, length, V2DataType.ACC, BaselineType.ABC,
            ABC_ORDERS.get(poly3, CorrectionOrder.ORDER2), 3)
        logger.debug(
            f'{trace_id}: ABC runs {self.abc_num_runs}, rank '
            f'{self.abc_rank}, poly1 order {poly1 - 1}, poly3 order '
            f'{poly3 - 1}, breaks {int(run[4])} {int(run[5])}')
        return True

    def _decimate(self):
        factor = self.sampling_factor
        self.accel = decimate_array(self.accel, factor)
        self.padded_accel = decimate_array(self.padded_accel, factor)
        self.velocity = decimate_array(self.velocity, factor)
        self.displacement = decimate_array(self.displacement, factor)
        self.initial_vel = self.no_real_value
        self.initial_dis = self.no_real_value
        self.sample_rate = self.orig_sample_rate
        self.dt = 1. / self.sample_rate
        self.processing_log = self.processing_log.add_decimation(
            self.orig_sample_rate)
        logger.info(
            f'{self.v1_trace.id}: decimated to {self.sample_rate:.1f} '
            'samples/sec')

    def _compute_stats(self):
        arrays = {
            V2DataType.ACC: self.accel,
            V2DataType.VEL: self.velocity,
            V2DataType.DIS: self.displacement,
        }
        self.stats = {}
        for dtype, array in arrays.items():
            stats = ArrayStats(array)
            self.stats[dtype] = (stats.peak_val, stats.peak_index, stats.mean)
        logger.debug(
            f'{self.v1_trace.id}: peak velocity '
            f'{self.stats[V2DataType.VEL][0]:f}')

    def get_peak_val(self, dtype):
        """Peak value of a V2 product."""
        return self.stats[dtype][0]

    def get_peak_index(self, dtype):
        """Sample index of the peak value of a V2 product."""
        return self.stats[dtype][1]

    def get_avg_val(self, dtype):
        """Mean value of a V2 product."""
        return self.stats[dtype][2]

    def get_array(self, dtype):
        """Data array of a V2 product."""
        return {
            V2DataType.ACC: self.accel,
            V2DataType.VEL: self.velocity,
            V2DataType.DIS: self.displacement,
        }[dtype]

    def _make_traces(self):
        computed = {}
        if self.strong_motion:
            cparams = self.computed_params
            computed = {
                'bracketed_duration': cparams.bracketed_duration,
                'arias_intensity': cparams.arias_intensity,
                'duration_interval': cparams.duration_interval,
                'rms_acceleration': cparams.rms_acceleration,
                'cumulative_abs_velocity': cparams.cav,
            }
        traces = {}
        for dtype in V2DataType:
            units_code, units = V2_UNITS[dtype]
            peak_val, peak_index, avg_val = self.stats[dtype]
            trace = make_trace(
                self.v1_trace, self.get_array(dtype),
                units_code=units_code,
                units=units,
                data_type=dtype,
                v2_status=self.status,
                processing_log=self.processing_log,
                lowcut=self.lowcut,
                highcut=self.highcut,
                pick_index=self.pick_index,
                start_index=self.start_index,
                baseline_type=self.basetype,
                strong_motion=self.strong_motion,
                **computed)
            trace.stats.delta = self.dt
            real_header = trace.stats.smproc.real_header
            real_header[DELTA_T] = self.dt / MSEC_TO_SEC
            real_header[PEAK_VAL] = peak_val
            real_header[PEAK_VAL_TIME] = peak_index * self.dt
            real_header[AVG_VAL] = avg_val
            real_header[SERIES_LENGTH] = len(trace.data) * self.dt
            traces[dtype] = trace
        self.acc = traces[V2DataType.ACC]
        self.vel = traces[V2DataType.VEL]
        self.dis = traces[V2DataType.DIS]
        self.acc.stats.smproc.initial_velocity = self.initial_vel
        self.acc.stats.smproc.initial_displacement = self.initial_dis
