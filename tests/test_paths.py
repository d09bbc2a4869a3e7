#!/usr/bin/env python3
"""
Tests for storytree/paths.py

Tests the three kind splitting policies and their notices.
"""

import re
import sys
import logging
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from storytree import deprecations
from storytree.paths import get_kind_options, resolve_kind, uses_legacy_separators


@pytest.fixture(autouse=True)
def rearm_warnings():
    deprecations.reset_all()
    yield
    deprecations.reset_all()


def warning_messages(caplog):
    return [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]


class TestUsesLegacySeparators:
    """Tests for uses_legacy_separators()."""

    def test_slash_only(self):
        assert uses_legacy_separators([{'kind': 'A/B'}, {'kind': 'C'}]) is False

    def test_pipe(self):
        assert uses_legacy_separators([{'kind': 'A/B'}, {'kind': 'Root|C'}]) is True

    def test_dot(self):
        assert uses_legacy_separators([{'kind': 'Forms.Input'}]) is True

    def test_empty(self):
        assert uses_legacy_separators([]) is False


class TestGetKindOptions:
    """Tests for get_kind_options()."""

    def test_missing_parameters(self):
        assert get_kind_options(None) == {}
        assert get_kind_options({}) == {}

    def test_malformed_options(self):
        assert get_kind_options({'options': 'nope'}) == {}

    def test_picks_only_kind_options(self):
        parameters = {'filename': 'a.js', 'options': {'showRoots': True, 'panelPosition': 'right'}}
        assert get_kind_options(parameters) == {'showRoots': True}

    def test_none_values_are_unset(self):
        parameters = {'options': {'hierarchySeparator': None, 'showRoots': None}}
        assert get_kind_options(parameters) == {}


class TestModernSplitting:
    """Policy 3: plain '/' splitting."""

    def test_splits_on_slash_without_root(self, caplog):
        with caplog.at_level(logging.WARNING):
            root, groups = resolve_kind('Components/Button', {})

        assert root is None
        assert groups == ['Components', 'Button']
        assert warning_messages(caplog) == []

    def test_show_roots_promotes_first_segment(self):
        root, groups = resolve_kind('Components/Forms/Input', {'showRoots': True})

        assert root == 'Components'
        assert groups == ['Forms', 'Input']

    def test_show_roots_needs_more_than_one_segment(self):
        root, groups = resolve_kind('Components', {'showRoots': True})

        assert root is None
        assert groups == ['Components']

    def test_show_roots_false(self):
        root, groups = resolve_kind('Components/Button', {'showRoots': False})

        assert root is None
        assert groups == ['Components', 'Button']

    def test_show_roots_overrides_implicit_legacy(self):
        """showRoots opts a story out of implicit legacy splitting."""
        root, groups = resolve_kind('Components/Button', {'showRoots': True}, legacy_kinds=True)

        assert root == 'Components'
        assert groups == ['Button']

    def test_dots_are_not_separators(self):
        root, groups = resolve_kind('Forms.Input/Text', {})

        assert root is None
        assert groups == ['Forms.Input', 'Text']


class TestImplicitLegacySplitting:
    """Policy 2: '|' or '.' somewhere in the input."""

    def test_legacy_split(self):
        root, groups = resolve_kind('Addon|Forms.Input', {}, legacy_kinds=True)

        assert root == 'Addon'
        assert groups == ['Forms', 'Input']

    def test_warns_once(self, caplog):
        with caplog.at_level(logging.WARNING):
            for _ in range(3):
                resolve_kind('Addon|Forms', {}, legacy_kinds=True)

        messages = warning_messages(caplog)
        assert len(messages) == 1
        assert "default hierarchy separators are changing" in messages[0]


class TestExplicitSeparators:
    """Policy 1: hierarchySeparator / hierarchyRootSeparator options."""

    def test_custom_separators(self):
        options = {'hierarchyRootSeparator': '::', 'hierarchySeparator': '-'}
        root, groups = resolve_kind('Addon::Forms-Input', options)

        assert root == 'Addon'
        assert groups == ['Forms', 'Input']

    def test_missing_root_separator_defaults_to_pipe(self):
        root, groups = resolve_kind('Addon|Forms>Input', {'hierarchySeparator': '>'})

        assert root == 'Addon'
        assert groups == ['Forms', 'Input']

    def test_missing_group_separator_defaults_to_slash_or_dot(self):
        root, groups = resolve_kind('Forms/Input.Text', {'hierarchyRootSeparator': '|'})

        assert root is None
        assert groups == ['Forms', 'Input', 'Text']

    def test_pattern_separator(self):
        options = {'hierarchySeparator': re.compile(r'\s*>\s*')}
        root, groups = resolve_kind('Forms > Input', options)

        assert groups == ['Forms', 'Input']

    def test_separators_win_over_show_roots(self, caplog):
        options = {'hierarchySeparator': '/', 'showRoots': True}

        with caplog.at_level(logging.WARNING):
            root, groups = resolve_kind('Components/Button', options)
            resolve_kind('Components/Link', options)

        assert root is None
        assert groups == ['Components', 'Button']

        messages = warning_messages(caplog)
        assert len(messages) == 2
        assert any("deprecated" in m for m in messages)
        assert any("cannot use both" in m for m in messages)

    def test_deprecation_without_show_roots(self, caplog):
        with caplog.at_level(logging.WARNING):
            resolve_kind('A/B', {'hierarchySeparator': '/'})

        messages = warning_messages(caplog)
        assert len(messages) == 1
        assert "deprecated" in messages[0]
