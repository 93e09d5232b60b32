"""Tests for conflict marker detection."""

import pytest

from reroller.git.markers import find_conflict_markers, has_conflict_markers, parse


def test_parse_simple_conflict():
    content = """line 1
line 2
<<<<<<< HEAD
our change
=======
their change
>>>>>>> 3f2a1c0 (Applying patch from issue 123)
line 3
"""
    hunks = parse(content)

    assert len(hunks) == 1
    hunk = hunks[0]
    assert hunk.start_line == 2
    assert hunk.end_line == 6
    assert hunk.ours_ref == "HEAD"
    assert hunk.theirs_ref == "3f2a1c0 (Applying patch from issue 123)"


def test_parse_diff3_format():
    content = """<<<<<<< HEAD
our change
||||||| base
original code
=======
their change
>>>>>>> branch
"""
    hunks = parse(content)

    assert len(hunks) == 1
    assert hunks[0].theirs_ref == "branch"


def test_parse_multiple_conflicts():
    content = """<<<<<<< HEAD
a
=======
b
>>>>>>> branch
middle
<<<<<<<
c
=======
d
>>>>>>>
"""
    hunks = parse(content)

    assert [h.start_line for h in hunks] == [0, 6]
    assert hunks[1].ours_ref == "ours"
    assert hunks[1].theirs_ref == "theirs"


def test_parse_clean_file():
    assert parse("line 1\nline 2\n") == []


def test_parse_missing_separator():
    with pytest.raises(ValueError, match="no separator"):
        parse("<<<<<<< HEAD\nour change\n>>>>>>> branch\n")


def test_parse_missing_end_marker():
    with pytest.raises(ValueError, match="no end marker"):
        parse("<<<<<<< HEAD\nours\n=======\ntheirs\n")


def test_has_conflict_markers():
    assert has_conflict_markers("<<<<<<< HEAD\na\n=======\nb\n>>>>>>> x\n")
    # A half-deleted hunk still counts as unresolved
    assert has_conflict_markers("<<<<<<< HEAD\na\n")
    assert not has_conflict_markers("resolved line\n")


def test_find_conflict_markers(tmp_path):
    (tmp_path / "clean.txt").write_text("resolved\n")
    (tmp_path / "dirty.txt").write_text(
        "<<<<<<< HEAD\na\n=======\nb\n>>>>>>> x\n"
    )
    (tmp_path / "bin.dat").write_bytes(b"\xff\xfe\x00\x01")

    marked = find_conflict_markers(
        tmp_path, ["clean.txt", "dirty.txt", "bin.dat", "gone.txt"]
    )

    assert marked == ["dirty.txt"]
