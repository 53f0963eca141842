"""
Unit tests for cgroup membership parsing.

Tests line grepping, controller table parsing, subpath lookup by controller
hint and the unified marker, and the root fallback when membership is unknown.
"""
import os
import sys

import pytest

from hwstats.cgroup.memory import get_memory_limit
from hwstats.cgroup.membership import (
    ROOT_CGROUP,
    UNIFIED_MARKER,
    ControllerTable,
    cgroup_path,
    grep_first_match,
)
from hwstats.exceptions import CgroupNotFoundError, UnsupportedPlatformError

MIXED_MEMBERSHIP = "12:cpu,cpuacct:/docker/abc\n5:memory:/docker/abc\n0::/\n"


@pytest.mark.unit
class TestGrepFirstMatch:
    """Test the substring-match-then-split primitive."""

    def test_extracts_subpath_from_controller_line(self):
        assert grep_first_match(MIXED_MEMBERSHIP, "memory", 2, ":") == "/docker/abc"

    def test_extracts_stat_value(self):
        data = "cache 100\nhierarchical_memory_limit 4096\n"
        assert grep_first_match(data, "hierarchical_memory_limit", 1, " ") == "4096"

    def test_trims_whitespace(self):
        assert grep_first_match("key  \t\nfoo: bar \n", "foo", 1, ":") == "bar"

    def test_first_match_wins(self):
        assert grep_first_match("a x 1\nb x 2\n", "x", 2, " ") == "1"

    def test_no_match_raises_not_found(self):
        with pytest.raises(CgroupNotFoundError):
            grep_first_match(MIXED_MEMBERSHIP, "pids", 2, ":")

    def test_index_out_of_range_raises_not_found(self):
        """A short matched line is not a crash."""
        with pytest.raises(CgroupNotFoundError):
            grep_first_match("cache\n", "cache", 1, " ")


@pytest.mark.unit
class TestControllerTable:
    """Test parsing of /proc/self/cgroup records."""

    def test_parse_records_in_order(self):
        table = ControllerTable.parse(MIXED_MEMBERSHIP)
        assert len(table) == 3
        first = table.lines[0]
        assert first.hierarchy_id == 12
        assert first.controllers == frozenset({"cpu", "cpuacct"})
        assert first.subpath == "/docker/abc"

    def test_unified_record(self):
        table = ControllerTable.parse(MIXED_MEMBERSHIP)
        unified = table.lines[-1]
        assert unified.is_unified
        assert unified.controllers == frozenset()
        assert unified.subpath == "/"

    def test_skips_blank_and_malformed_lines(self):
        table = ControllerTable.parse("\nnot-a-record\nx:cpu:/a\n3:pids:/p\n")
        assert [line.hierarchy_id for line in table] == [3]

    def test_subpath_may_contain_colons(self):
        table = ControllerTable.parse("0::/kubepods/pod:1/ctr\n")
        assert table.lines[0].subpath == "/kubepods/pod:1/ctr"

    def test_find_subpath_by_controller(self):
        table = ControllerTable.parse(MIXED_MEMBERSHIP)
        assert table.find_subpath("memory") == "/docker/abc"

    def test_find_subpath_unified_marker(self):
        table = ControllerTable.parse(MIXED_MEMBERSHIP)
        assert table.find_subpath(UNIFIED_MARKER) == "/"

    def test_find_subpath_none_selects_unified(self):
        table = ControllerTable.parse("1:memory:/a\n0::/b\n")
        assert table.find_subpath(None) == "/b"

    def test_cpu_hint_skips_cpuset(self):
        """'cpu,' matches a lone cpu controller but never cpuset."""
        table = ControllerTable.parse("3:cpuset:/set\n2:cpu:/cpu-only\n")
        assert table.find_subpath("cpu,") == "/cpu-only"

    def test_returns_first_matching_record(self):
        table = ControllerTable.parse("4:memory:/first\n5:memory:/second\n")
        assert table.find_subpath("memory") == "/first"

    def test_no_match_raises(self):
        table = ControllerTable.parse("0::/\n")
        with pytest.raises(CgroupNotFoundError):
            table.find_subpath("memory")

    def test_read_missing_file_raises_not_found(self, cgroup_tree):
        with pytest.raises(CgroupNotFoundError):
            ControllerTable.read(cgroup_tree.paths)

    def test_read_off_linux_raises_unsupported(self, v2_tree, monkeypatch):
        monkeypatch.setattr(sys, "platform", "darwin")
        with pytest.raises(UnsupportedPlatformError):
            ControllerTable.read(v2_tree.paths)


@pytest.mark.unit
class TestCgroupPath:
    """Test the never-failing cgroup path lookup."""

    def test_v2_path(self, v2_tree):
        assert cgroup_path(v2_tree.paths) == "/user.slice/app.scope"

    def test_unreadable_membership_is_root(self, cgroup_tree):
        assert cgroup_path(cgroup_tree.paths) == ROOT_CGROUP

    def test_no_unified_line_is_root(self, cgroup_tree):
        cgroup_tree.membership("5:memory:/docker/abc\n")
        assert cgroup_path(cgroup_tree.paths) == ROOT_CGROUP

    def test_off_linux_is_root(self, v2_tree, monkeypatch):
        monkeypatch.setattr(sys, "platform", "win32")
        assert cgroup_path(v2_tree.paths) == ROOT_CGROUP

    def test_undecodable_subpath_is_kept_as_bytes(self, cgroup_tree):
        """Directory names that are not UTF-8 still resolve to the real directory."""
        cgroup_tree.membership("").write_bytes(b"0::/bad\xffname\n")
        path = cgroup_path(cgroup_tree.paths)
        assert os.fsencode(path) == b"/bad\xffname"

        nested = os.path.join(os.fsencode(cgroup_tree.root), b"bad\xffname")
        os.mkdir(nested)
        with open(os.path.join(nested, b"memory.max"), "w") as f:
            f.write("8192\n")
        assert get_memory_limit(cgroup_tree.paths) == 8192

    def test_membership_changes_are_observed(self, v2_tree):
        """No caching: a rewritten membership file is read on the next call."""
        assert cgroup_path(v2_tree.paths) == "/user.slice/app.scope"
        v2_tree.membership("0::/other.scope\n")
        assert cgroup_path(v2_tree.paths) == "/other.scope"
