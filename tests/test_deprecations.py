#!/usr/bin/env python3
"""
Tests for storytree/deprecations.py

Tests that advisory notices are logged once per process.
"""

import sys
import logging
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from storytree.deprecations import OneShotWarning, reset_all, warn_removing_hierarchy_separators


def test_one_shot_warning_logs_once(caplog):
    warning = OneShotWarning("legacy thing is going away")

    with caplog.at_level(logging.WARNING):
        assert warning() is True
        assert warning() is False
        assert warning() is False

    messages = [r.getMessage() for r in caplog.records]
    assert messages.count("legacy thing is going away") == 1
    assert warning.fired


def test_one_shot_warning_reset_rearms(caplog):
    warning = OneShotWarning("rearmed")

    with caplog.at_level(logging.WARNING):
        warning()
        warning.reset()
        warning()

    assert [r.getMessage() for r in caplog.records].count("rearmed") == 2


def test_reset_all_rearms_module_warnings():
    warn_removing_hierarchy_separators()
    assert warn_removing_hierarchy_separators.fired

    reset_all()

    assert not warn_removing_hierarchy_separators.fired
