# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Logging setup for smproc.

The processing modules only create their own loggers: this module is
meant to be called by the program driving the processing.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import sys
import os
import platform
import logging
import contextlib
from datetime import datetime
import numpy
import scipy
import obspy
from .. import __version__, __banner__


def _color_handler_emit(fn):
    """
    Add color-coding to the logging handler emitter.

    Source: https://stackoverflow.com/a/20707569/2021880
    """
    def new(*args):
        levelno = args[0].levelno
        if levelno >= logging.ERROR:
            color = '\x1b[31;1m'  # red
        elif levelno >= logging.WARNING:
            color = '\x1b[33;1m'  # yellow
        elif levelno >= logging.INFO:
            color = '\x1b[0m'  # no color
        elif levelno >= logging.DEBUG:
            color = '\x1b[35;1m'  # purple
        else:
            color = '\x1b[0m'  # no color
        # Color-code the message
        args[0].msg = f'{color}{args[0].msg}\x1b[0m'
        return fn(*args)
    return new


def _log_debug_information(logger, config=None):
    banner = f'\n{__banner__}\nThis is smproc v{__version__}.\n'
    logger.info(banner)
    logger.debug(f'smproc version: {__version__}')
    uname = platform.uname()
    logger.debug(f'Platform: {uname[0]} {uname[2]} {uname[4]}')
    python_version = '.'.join(map(str, sys.version_info[:3]))
    logger.debug(f'Python version: {python_version}')
    logger.debug(f'ObsPy version: {obspy.__version__}')
    logger.debug(f'NumPy version: {numpy.__version__}')
    logger.debug(f'SciPy version: {scipy.__version__}')
    logger.debug('Running arguments:')
    logger.debug(' '.join(sys.argv))
    if config is None:
        return
    # See if there are warnings to deliver
    for _ in range(len(config.warnings)):
        msg = config.warnings.pop(0)
        logger.warning(msg)


def setup_logging(outdir, basename=None, progname='smproc', config=None):
    """
    Set up the logging infrastructure.

    A DEBUG level log file is written to ``outdir`` and INFO level
    messages are sent to the console.

    :param outdir: output directory for the log file
    :type outdir: str
    :param basename: basename for the log file (default: current date
        and time)
    :type basename: str
    :param progname: program name used for the main logger
    :type progname: str
    :param config: configuration, whose warnings are logged
    :type config: :class:`~smproc.config.Config`
    :return: path to the log file
    :rtype: str
    """
    if not os.path.exists(outdir):
        os.makedirs(outdir)
    if basename is None:
        basename = datetime.now().strftime('%Y%m%d_%H%M%S')
    logfile = os.path.join(outdir, f'{basename}.smp.log')

    logger_root = logging.getLogger()
    for hdlr in logger_root.handlers[:]:
        hdlr.flush()
        hdlr.close()
        logger_root.removeHandler(hdlr)

    # captureWarnings is not supported in old versions of python
    with contextlib.suppress(Exception):
        logging.captureWarnings(True)
    logger_root.setLevel(logging.DEBUG)
    filehand = logging.FileHandler(filename=logfile, mode='w')
    filehand.setLevel(logging.DEBUG)
    formatter = logging.Formatter('%(asctime)s %(name)-20s '
                                  '%(levelname)-8s %(message)s')
    filehand.setFormatter(formatter)
    logger_root.addHandler(filehand)

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    # Add logger color coding on all platforms but win32
    if sys.platform != 'win32' and sys.stdout.isatty():
        console.emit = _color_handler_emit(console.emit)
    logger_root.addHandler(console)

    _log_debug_information(logging.getLogger(progname), config)
    return logfile
