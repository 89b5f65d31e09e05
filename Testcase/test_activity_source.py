"""
Activity source loading and label parsing.
"""

import os
import sys
import tempfile

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from activity_source import load_activities_file, parse_activities, read_activity_pool
from bingo_constants import EMPTY_LABEL, FREE_LABEL
from bingo_errors import SourceMalformed, SourceUnavailable


def test_splits_repeatable_marker():
    non_rep, rep = parse_activities([
        "Go for a walk",
        "Drink water (repeatable)",
        "Stretch (Repeatable)",
        "Call mum   (REPEATABLE)",
    ])
    assert non_rep == ["Go for a walk"]
    assert rep == ["Drink water", "Stretch", "Call mum"]


def test_deduplicates_each_set_independently():
    non_rep, rep = parse_activities([
        "Read", "Read", "Water (repeatable)", "Walk", "Water (repeatable)", "Read (repeatable)",
    ])
    assert non_rep == ["Read", "Walk"]
    assert rep == ["Water", "Read"]


def test_drops_blank_and_non_string_entries():
    non_rep, rep = parse_activities(["", "   ", "(repeatable)", 42, None, ["x"], "Keep me"])
    assert non_rep == ["Keep me"]
    assert rep == []


def test_drops_reserved_layout_labels():
    non_rep, rep = parse_activities([
        FREE_LABEL, EMPTY_LABEL, "Walk",
        f"{FREE_LABEL} (repeatable)", f"{EMPTY_LABEL} (Repeatable)",
    ])
    assert non_rep == ["Walk"]
    assert rep == []


def test_reserved_labels_match_exactly():
    non_rep, _ = parse_activities(["Empty the dishwasher", "free space"])
    assert non_rep == ["Empty the dishwasher", "free space"]


def test_marker_must_be_suffix():
    non_rep, rep = parse_activities(["(repeatable) first", "mid (repeatable) dle"])
    assert non_rep == ["(repeatable) first", "mid (repeatable) dle"]
    assert rep == []


def test_non_list_is_empty():
    assert parse_activities(None) == ([], [])
    assert parse_activities("Walk") == ([], [])


def test_reads_yaml():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, 'activities.yaml')
        with open(path, 'w') as f:
            f.write("activities:\n  - Walk\n  - Water (repeatable)\n")
        assert read_activity_pool(path) == (["Walk"], ["Water"])


def test_reads_toml():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, 'activities.toml')
        with open(path, 'w') as f:
            f.write('activities = ["Walk", "Water (repeatable)"]\n')
        assert read_activity_pool(path) == (["Walk"], ["Water"])


def test_missing_activities_key_is_empty():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, 'activities.yaml')
        with open(path, 'w') as f:
            f.write("something_else: 1\n")
        assert read_activity_pool(path) == ([], [])


def test_empty_file_is_empty():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, 'activities.yml')
        open(path, 'w').close()
        assert load_activities_file(path) == {}


def test_missing_file_is_unavailable():
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(SourceUnavailable) as info:
            load_activities_file(os.path.join(tmpdir, 'activities.yaml'))
        assert info.value.status_code == 500
        assert 'not found' in info.value.message


def test_bad_yaml_is_malformed():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, 'activities.yaml')
        with open(path, 'w') as f:
            f.write("activities: [unclosed\n")
        with pytest.raises(SourceMalformed):
            load_activities_file(path)


def test_bad_toml_is_malformed():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, 'activities.toml')
        with open(path, 'w') as f:
            f.write('activities = ["unclosed"\n')
        with pytest.raises(SourceMalformed):
            load_activities_file(path)


def test_top_level_list_is_malformed():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, 'activities.yaml')
        with open(path, 'w') as f:
            f.write("- Walk\n- Run\n")
        with pytest.raises(SourceMalformed):
            load_activities_file(path)


def test_unsupported_extension_is_malformed():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, 'activities.txt')
        with open(path, 'w') as f:
            f.write("Walk\n")
        with pytest.raises(SourceMalformed):
            load_activities_file(path)


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
