# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Shared fixtures for the smproc tests.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import numpy as np
import pytest
from obspy import Trace
from smproc.config import Config
from smproc.smp_constants import (
    RECORDER_LSB, SENSOR_SENSITIVITY, MOMENT_MAGNITUDE)
from smproc.smp_trace import init_smproc_header

V0_COUNTS = [
    3284, 3334, 3296, 3284, 3308, 3242, 3236, 3324, 3322, 3262, 3300, 3334,
    3302, 3266, 3322, 3336, 3312, 3298, 3254]
LSB = 0.298023
SENSITIVITY = 0.627


@pytest.fixture
def config():
    """Default configuration."""
    return Config()


@pytest.fixture
def v0_trace():
    """Short record in counts, with calibration values."""
    trace = Trace(
        data=np.array(V0_COUNTS, dtype=np.int32),
        header={'network': 'CE', 'station': '12345', 'location': '',
                'channel': 'HNZ', 'delta': 0.005})
    init_smproc_header(trace)
    real_header = trace.stats.smproc.real_header
    real_header[RECORDER_LSB] = LSB
    real_header[SENSOR_SENSITIVITY] = SENSITIVITY
    return trace


def synthetic_record(sample_rate=200., duration=40., onset=10., seed=42):
    """
    Acceleration (cm/s^2) with low amplitude noise followed by a
    decaying 2 Hz oscillation starting at ``onset`` seconds.
    """
    rng = np.random.default_rng(seed)
    dt = 1. / sample_rate
    time = np.arange(int(duration * sample_rate)) * dt
    acc = 0.01 * rng.standard_normal(len(time))
    after = time >= onset
    tau = time[after] - onset
    acc[after] += 50. * np.exp(-tau / 3.) * np.sin(2. * np.pi * 2. * tau)
    return acc


def clean_record(sample_rate=200., duration=40., onset=10., length=10.,
                 seed=42):
    """
    Acceleration (cm/s^2) with low amplitude noise followed by a 2 Hz
    pulse of about 0.08 g, starting at ``onset`` seconds.

    The pulse is the second derivative of the displacement
    ``0.5 * sin(pi*t/length)**4 * sin(4*pi*t)``, so that velocity and
    displacement come back to zero at the end of the pulse.
    """
    rng = np.random.default_rng(seed)
    dt = 1. / sample_rate
    time = np.arange(int(duration * sample_rate)) * dt
    acc = 0.01 * rng.standard_normal(len(time))
    inside = (time >= onset) & (time <= onset + length)
    tau = time[inside] - onset
    omega = 2. * np.pi * 2.
    theta = np.pi / length
    sin_t = np.sin(theta * tau)
    cos_t = np.cos(theta * tau)
    env = sin_t**4
    denv = 4. * theta * sin_t**3 * cos_t
    ddenv = theta**2 * (12. * sin_t**2 * cos_t**2 - 4. * sin_t**4)
    acc[inside] += 0.5 * (
        ddenv * np.sin(omega * tau) +
        2. * denv * omega * np.cos(omega * tau) -
        env * omega**2 * np.sin(omega * tau))
    return acc


def make_v1_trace(data, delta=0.005):
    """V1 acceleration trace (cm/s^2), magnitude 6.0."""
    trace = Trace(
        data=data,
        header={'network': 'CE', 'station': '12345', 'location': '',
                'channel': 'HNZ', 'delta': delta})
    init_smproc_header(trace)
    trace.stats.smproc.real_header[MOMENT_MAGNITUDE] = 6.0
    return trace


@pytest.fixture
def v1_trace():
    """V1 record with a decaying oscillation, 200 samples/s."""
    return make_v1_trace(synthetic_record())


@pytest.fixture
def clean_v1_trace():
    """V1 record whose velocity and displacement return to zero."""
    return make_v1_trace(clean_record())
