# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
ConfigObj helpers: reading, validating and writing smproc configuration
files.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import os
from configobj import ConfigObj, flatten_errors
from configobj.validate import Validator
from .. import __version__

CONFIGSPEC_FILE = os.path.join(os.path.dirname(__file__), 'configspec.conf')


def read_config_file(config_file, configspec=None):
    """
    Read a configuration file.

    Without ``configspec``, the file is read as a configuration
    specification: no interpolation and no list parsing.

    :param config_file: path to the configuration file
    :type config_file: str
    :param configspec: configuration specification
    :type configspec: ConfigObj
    :return: the configuration
    :rtype: ConfigObj

    :raises ValueError: if the file cannot be opened or parsed
    """
    if configspec is None:
        kwargs = {'interpolation': False, 'list_values': False,
                  '_inspec': True}
    else:
        kwargs = {'configspec': configspec}
    try:
        return ConfigObj(
            config_file, file_error=True, default_encoding='utf8', **kwargs)
    except IOError as err:
        raise ValueError(f'Unable to open "{config_file}": {err}') from err
    except Exception as err:
        raise ValueError(f'Unable to read "{config_file}": {err}') from err


def parse_configspec():
    """Parse ``configspec.conf``, shipped with the package."""
    return read_config_file(CONFIGSPEC_FILE)


def validate_config_obj(config_obj):
    """
    Validate a configuration and convert its values to their types.

    :param config_obj: configuration with a configspec attached
    :type config_obj: ConfigObj
    :return: one message per invalid entry, empty if all entries are valid
    :rtype: list of str
    """
    result = config_obj.validate(Validator(), preserve_errors=True)
    if result is True:
        return []
    if not result:
        return ['No configuration value present!']
    messages = []
    for _sections, key, error in flatten_errors(config_obj, result):
        if key is None:
            continue
        value = config_obj.get(key)
        reason = error if error else 'missing value'
        messages.append(f'Invalid value for "{key}": "{value}" ({reason})')
    return messages


def get_default_config_obj(configspec):
    """
    Build a configuration holding the default values of ``configspec``.

    Comments of the specification are kept, so that the object can be
    written as a sample configuration file.

    :param configspec: configuration specification
    :type configspec: ConfigObj
    :return: the default configuration
    :rtype: ConfigObj
    """
    config_obj = ConfigObj(configspec=configspec, default_encoding='utf8')
    validate_config_obj(config_obj)
    # defaults are written out as regular values
    config_obj.defaults = []
    config_obj.initial_comment = configspec.initial_comment
    config_obj.comments = configspec.comments
    config_obj.final_comment = configspec.final_comment
    return config_obj


def write_sample_config(filename, values=None):
    """
    Write a sample configuration file.

    :param filename: output file name
    :type filename: str
    :param values: values replacing the defaults, e.g. a
        :class:`~smproc.config.Config`; keys which are not configuration
        options are ignored
    :type values: dict
    """
    configspec = parse_configspec()
    config_obj = get_default_config_obj(configspec)
    if values is not None:
        for key in config_obj:
            if key in values:
                config_obj[key] = values[key]
    config_obj.initial_comment = (
        [f'# smproc {__version__} sample configuration file'] +
        list(configspec.initial_comment)[1:])
    with open(filename, 'wb') as fp:
        config_obj.write(fp)
