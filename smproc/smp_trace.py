# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Channel trace headers.

Each channel is an ObsPy :class:`~obspy.core.trace.Trace`. The COSMOS
real header and the processing information are stored in
``trace.stats.smproc``, an :class:`~obspy.core.util.AttribDict`.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import numpy as np
from obspy.core import Trace
from obspy.core.util import AttribDict
from .smp_constants import DEFAULT_NOREALVAL, DELTA_T, REAL_HEADER_LENGTH
from .smp_errors import SmFormatError
from .smp_process_steps import ProcessingLog


def init_smproc_header(trace, real_header=None,
                       no_real_value=DEFAULT_NOREALVAL):
    """
    Add an empty ``smproc`` header to the trace.

    :param trace: trace
    :type trace: :class:`~obspy.core.trace.Trace`
    :param real_header: real header values, filled with ``no_real_value``
        if None
    :type real_header: array-like
    :param no_real_value: value of undefined real header entries
    :type no_real_value: float

    :raises SmFormatError: if ``real_header`` has too few values
    """
    if real_header is None:
        real_header = np.full(REAL_HEADER_LENGTH, no_real_value)
        # sampling interval is stored in milliseconds
        real_header[DELTA_T] = trace.stats.delta * 1000.
    elif len(real_header) < REAL_HEADER_LENGTH:
        raise SmFormatError(
            f'{trace.id}: real header has {len(real_header)} values, '
            f'expected {REAL_HEADER_LENGTH}')
    trace.stats.smproc = AttribDict({
        'real_header': np.array(real_header, dtype=float),
        'no_real_value': no_real_value,
        'processing_log': ProcessingLog(),
    })
    return trace


def get_smproc_header(trace):
    """Return the ``smproc`` header of the trace, creating it if needed."""
    if 'smproc' not in trace.stats:
        init_smproc_header(trace)
    return trace.stats.smproc


def sncl_code(trace):
    """
    Station code used in the filter corner table: network, station,
    channel and location, with ``--`` for an empty location.
    """
    stats = trace.stats
    location = stats.location or '--'
    return f'{stats.network}.{stats.station}.{stats.channel}.{location}'


def make_trace(template, data, **header):
    """
    Create a new trace with the metadata of ``template``.

    The ``smproc`` header is copied, so that the template is not modified.

    :param template: trace whose metadata are copied
    :type template: :class:`~obspy.core.trace.Trace`
    :param data: trace data
    :type data: :class:`numpy.ndarray`
    :param header: additional ``smproc`` header values
    :return: the new trace
    :rtype: :class:`~obspy.core.trace.Trace`
    """
    stats = template.stats.copy()
    smproc = get_smproc_header(template)
    stats.smproc = AttribDict(smproc)
    stats.smproc.real_header = np.array(smproc.real_header, dtype=float)
    stats.smproc.update(header)
    data = np.asarray(data, dtype=float)
    stats.npts = len(data)
    return Trace(data=data, header=stats)
