# -*- coding: utf-8 -*-
# SPDX-License-Identifier: CECILL-2.1
"""
Tests for the logging setup.

:copyright:
    2025-2026 The smproc developers
:license:
    CeCILL Free Software License Agreement v2.1
    (http://www.cecill.info/licences.en.html)
"""
import logging
import os
import pytest
from smproc.config import Config
from smproc.setup import setup_logging


@pytest.fixture
def restore_root_logger():
    logger_root = logging.getLogger()
    handlers = logger_root.handlers[:]
    level = logger_root.level
    yield
    for hdlr in logger_root.handlers[:]:
        hdlr.close()
        logger_root.removeHandler(hdlr)
    for hdlr in handlers:
        logger_root.addHandler(hdlr)
    logger_root.setLevel(level)
    logging.captureWarnings(False)


@pytest.mark.usefixtures('restore_root_logger')
def test_setup_logging(tmp_path):
    config = Config()
    config.warnings.append('a configuration warning')
    outdir = str(tmp_path / 'out')
    logfile = setup_logging(outdir, 'test', config=config)
    assert logfile == os.path.join(outdir, 'test.smp.log')
    logging.getLogger('v2_process').info('processing message')
    for hdlr in logging.getLogger().handlers:
        hdlr.flush()
    with open(logfile, encoding='utf-8') as fp:
        text = fp.read()
    assert 'This is smproc' in text
    assert 'a configuration warning' in text
    assert 'processing message' in text
    assert not config.warnings
