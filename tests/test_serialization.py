#!/usr/bin/env python3
"""
Tests for record/JSON import and export, configuration and tree rendering.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import json
import pytest
from termfs import (
    Namespace, NamespaceConfig, DEFAULT_LAYOUT, format_tree, InvalidArgument,
)


@pytest.fixture
def ns():
    return Namespace.with_default_layout()


class TestRecordRoundTrip:
    """to_record / from_record."""

    def test_layout_round_trips_exactly(self, ns):
        record = ns.to_record()
        other = Namespace()
        other.from_record(record)
        assert other.to_record() == record

    def test_recognized_fields_preserved(self, ns):
        record = ns.to_record()
        bash = record['children'][0]['children'][0]
        assert bash['name'] == 'bash'
        assert bash['kind'] == 'exec'
        assert bash['permissions'] == 'rwxr-xr-x'
        assert bash['modified'] == '23.03.2024 02:54'
        assert bash['mime'] == 'application/x-executable'
        assert bash['payload'].startswith('#!/bin/bash')

    def test_identities_not_preserved(self, ns):
        before = {n.uid for n in ns.search('*')}
        ns.from_record(ns.to_record())
        after = {n.uid for n in ns.search('*')}
        assert not before & after

    def test_import_resets_cwd(self, ns):
        ns.change_directory('/home/demo')
        ns.from_record(ns.to_record())
        assert ns.current_path() == '/'
        assert ns.cwd is ns.tree.root

    def test_import_empty(self, ns):
        ns.from_record(None)
        assert ns.tree.is_empty
        assert ns.to_record() is None

    def test_unknown_fields_dropped(self):
        ns = Namespace()
        ns.from_record({'name': 'r', 'kind': 'dir', 'icon': 'folder', 'children': [
            {'name': 'f', 'payload': 'x', 'size': 999, 'uid': 'ABC'}]})
        f = ns.resolve('/f')
        assert f.size == 1
        assert f.uid != 'ABC'
        assert 'icon' not in ns.to_record()

    def test_bytes_survive_round_trip(self, ns):
        ns.write_file('/tmp/blob', b'\x89PNG\x00')
        record = ns.to_record()
        ns.from_record(record)
        assert ns.read_file('/tmp/blob') == b'\x89PNG\x00'

    def test_children_order_preserved(self, ns):
        ns.mkdir('/tmp/z')
        ns.mkdir('/tmp/a')
        ns.from_record(ns.to_record())
        assert ns.ls('/tmp') == ['z', 'a']

    @pytest.mark.parametrize('bad', ['a/b', '.', '..', '/'])
    def test_unreachable_child_names_rejected(self, ns, bad):
        before = ns.to_record()
        with pytest.raises(InvalidArgument):
            ns.from_record({'name': '/', 'kind': 'dir', 'children': [
                {'name': 'ok', 'kind': 'dir'},
                {'name': bad, 'kind': 'dir'},
            ]})
        assert ns.to_record() == before

    def test_unreachable_name_rejected_by_init_structure(self, ns):
        with pytest.raises(InvalidArgument):
            ns.init_structure({'name': 'x/y', 'payload': 'z'}, parent=ns.resolve('/tmp'))
        assert ns.ls('/tmp') == []


class TestJson:
    """JSON string wrappers."""

    def test_json_round_trip(self, ns):
        text = ns.to_json()
        assert json.loads(text)['name'] == '~'
        other = Namespace()
        other.from_json(text)
        assert other.to_record() == ns.to_record()

    def test_invalid_json(self, ns):
        with pytest.raises(InvalidArgument):
            ns.from_json('{not json')
        assert ns.exists('/etc/passwd')


class TestConfig:
    """NamespaceConfig validation."""

    def test_defaults(self):
        config = NamespaceConfig()
        assert config.user == 'root'
        assert config.owner_group == 'root'
        assert config.cache_size == 1000

    def test_from_dict_ignores_unknown(self):
        config = NamespaceConfig.from_dict({'user': 'eve', 'cache_size': 5, 'theme': 'dark'})
        assert config.user == 'eve'
        assert config.cache_size == 5

    @pytest.mark.parametrize('size', [0, -1, 'big'])
    def test_bad_cache_size(self, size):
        with pytest.raises(InvalidArgument):
            NamespaceConfig(cache_size=size)

    def test_custom_date_format(self):
        ns = Namespace(NamespaceConfig(date_format='%Y'), record={'name': '/', 'kind': 'dir'})
        node = ns.write_file('/f', 'x')
        assert len(node.modified) == 4 and node.modified.isdigit()

    def test_custom_hidden_prefix(self):
        ns = Namespace(NamespaceConfig(hidden_prefix='_'), record={'name': '/', 'kind': 'dir'})
        ns.write_file('/_private', 'x')
        ns.write_file('/.visible', 'y')
        assert ns.ls('/') == ['.visible']


class TestFormatTree:
    """Box-drawing rendering."""

    def test_directories_only(self, ns):
        assert format_tree(ns.resolve('/home')) == (
            "┗━━ demo\n"
            "    ┗━━ projects"
        )

    def test_with_files(self, ns):
        lines = format_tree(ns.resolve('/var'), show_files=True).split('\n')
        assert lines == [
            "┣━━ log",
            "┃   ┗━━ syslog",
            "┗━━ www",
            "    ┗━━ index.html",
        ]

    def test_default_layout_is_not_mutated(self, ns):
        ns.write_file('/etc/passwd', 'changed')
        assert 'changed' not in json.dumps(DEFAULT_LAYOUT)
