# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Config class for smproc.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import os
from configobj import ConfigObj
from .configobj_helpers import (
    get_default_config_obj, parse_configspec, read_config_file,
    validate_config_obj)
from ..smp_constants import (
    CMSQSECN, CMSQSECT, GLN, GUNITST, DEFAULT_DIFFORDER, DEFAULT_SM_THRESHOLD)

# keys which are not configuration file options
INTERNAL_KEYS = ('config_file', 'warnings')


class Config(dict):
    """
    Processing configuration.

    A new ``Config`` holds the default values from ``configspec.conf``.
    Values can be read with the dict or with the attribute syntax.
    Non-fatal problems found during validation are stored as messages in
    ``warnings``, to be logged once logging is set up.
    """
    def __init__(self):
        # Additional config values. They must be defined using the dict syntax.
        self['config_file'] = None
        self['warnings'] = []
        config_obj = get_default_config_obj(parse_configspec())
        self.update(config_obj.dict())

    def __setitem__(self, key, value):
        """Make Config keys accessible as attributes."""
        super().__setattr__(key, value)
        super().__setitem__(key, value)

    def __getattr__(self, key):
        """Make Config keys accessible as attributes."""
        try:
            return self.__getitem__(key)
        except KeyError as err:
            raise AttributeError(err) from err

    __setattr__ = __setitem__

    def update(self, other):
        """
        Update the configuration with the values from another dictionary.

        ``'None'`` strings are converted to None.

        :param dict other: The dictionary with the new values
        """
        for key, value in other.items():
            self[key] = None if value == 'None' else value

    def read(self, config_file):
        """
        Read a configuration file and validate it.

        Options missing from the file keep their current value.

        :param config_file: path to the configuration file
        :type config_file: str

        :raises ValueError: if the file cannot be read or contains invalid
            values
        """
        config_file = os.path.abspath(os.path.expanduser(config_file))
        config_obj = read_config_file(config_file, parse_configspec())
        self.update(config_obj.dict())
        self['config_file'] = config_file
        self.validate()

    def validate(self):
        """
        Validate the configuration and convert values to their types.

        :raises ValueError: if an option has an invalid value
        """
        config_obj = ConfigObj(
            {key: val for key, val in self.items()
             if key not in INTERNAL_KEYS},
            configspec=parse_configspec())
        errors = validate_config_obj(config_obj)
        if errors:
            raise ValueError('\n'.join(errors))
        self.update(config_obj.dict())
        self._check_data_units()
        self._check_filter_order()
        self._check_differentiation_order()
        self._check_strong_motion_threshold()

    def _check_data_units(self):
        if self.data_units_code not in (CMSQSECN, GLN):
            raise ValueError(
                f'Invalid value for "data_units_code": '
                f'"{self.data_units_code}" (must be {CMSQSECN} or {GLN})')

    def _check_filter_order(self):
        if self.bp_filter_order % 2:
            raise ValueError(
                f'Invalid value for "bp_filter_order": '
                f'"{self.bp_filter_order}" (must be even)')

    def _check_differentiation_order(self):
        if self.differentiation_order not in (3, 5, 7, 9):
            self.warnings.append(
                f'Invalid differentiation order '
                f'{self.differentiation_order}: using {DEFAULT_DIFFORDER}')
            self['differentiation_order'] = DEFAULT_DIFFORDER

    def _check_strong_motion_threshold(self):
        if not 0 <= self.strong_motion_threshold <= 100:
            self.warnings.append(
                f'Invalid strong motion threshold '
                f'{self.strong_motion_threshold}: '
                f'using {DEFAULT_SM_THRESHOLD}')
            self['strong_motion_threshold'] = DEFAULT_SM_THRESHOLD

    @property
    def data_units(self):
        """Name of the V1 acceleration units."""
        return GUNITST if self.data_units_code == GLN else CMSQSECT

    @property
    def use_fft(self):
        """True if integration is performed in the frequency domain."""
        return str(self.integration_method).lower() == 'freq'

    @property
    def num_roll(self):
        """Band-pass filter roll-off (half the filter order)."""
        return self.bp_filter_order // 2
