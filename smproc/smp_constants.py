# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Constants, codes and enumerations for smproc.

Real header indices are zero-based positions in the COSMOS real header
array (real header #22 is index 21).

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import sys
from enum import Enum


class V2Status(Enum):
    """Outcome of the V2 processing."""
    GOOD = 'GOOD'
    FAILQC = 'FAILQC'
    NOEVENT = 'NOEVENT'
    NOABC = 'NOABC'
    FAILINIT = 'FAILINIT'

    @property
    def has_products(self):
        """True if acceleration, velocity and displacement are emitted."""
        return self in (V2Status.GOOD, V2Status.FAILQC)


class MagnitudeType(Enum):
    """Magnitude used for filter corner selection."""
    INVALID = 'INVALID'
    MOMENT = 'MOMENT'
    M_LOCAL = 'M_LOCAL'
    SURFACE = 'SURFACE'
    M_OTHER = 'M_OTHER'
    LOWSPS = 'LOWSPS'


class EventOnsetType(Enum):
    """Event onset detection method."""
    AIC = 'AIC'
    PWD = 'PWD'


class BaselineType(Enum):
    """Baseline correction method."""
    BESTFIT = 'BESTFIT'
    ABC = 'ABC'


class CorrectionOrder(Enum):
    """Order of a baseline correction function."""
    MEAN = 'MEAN'
    ORDER1 = 'ORDER1'
    ORDER2 = 'ORDER2'
    ORDER3 = 'ORDER3'
    SPLINE = 'SPLINE'


class V2DataType(Enum):
    """V2 product type."""
    ACC = 'ACC'
    VEL = 'VEL'
    DIS = 'DIS'


# sentinels used by the numeric primitives
MIN_VALUE = 5e-324
MAX_VALUE = sys.float_info.max
OPS_EPSILON = 1e-5

DEFAULT_NOINTVAL = -999
DEFAULT_NOREALVAL = -999.0

# units
CMSQSECN = 4
CMSQSECT = 'cm/sec2'
CMSECN = 5
CMSECT = 'cm/sec'
CMN = 6
CMT = 'cm'
GLN = 2
GUNITST = 'g'
SECN = 1
SECT = 'sec'

MSEC_TO_SEC = 0.001
FROM_G_CONVERSION = 980.665
TO_G_CONVERSION = 0.0010197

# real header indices
MOMENT_MAGNITUDE = 12
SURFACE_MAGNITUDE = 13
LOCAL_MAGNITUDE = 14
OTHER_MAGNITUDE = 15
RECORDER_LSB = 21
MEAN_ZERO = 35
SENSOR_SENSITIVITY = 41
DELTA_T = 61
SERIES_LENGTH = 62
PEAK_VAL = 63
PEAK_VAL_TIME = 64
AVG_VAL = 65
REAL_HEADER_LENGTH = 100

# processing defaults
DEFAULT_NUM_ROLL = 2
DEFAULT_DIFFORDER = 5
DEFAULT_SM_THRESHOLD = 5.0
DEFAULT_QC_VALUE = 0.1
DEFAULT_1ST_POLY_ORD_LOWER = 1
DEFAULT_1ST_POLY_ORD_UPPER = 2
DEFAULT_3RD_POLY_ORD_LOWER = 1
DEFAULT_3RD_POLY_ORD_UPPER = 3
SAMPLING_LIMIT = 200

# response spectra
V3_DAMPING_VALUES = (0.00, 0.02, 0.05, 0.10, 0.20)
V3_SAMPLING_RATES = (50.0, 100.0, 200.0, 500.0)
NUM_T_PERIODS = 91
NUM_COEF_VALS = 6
