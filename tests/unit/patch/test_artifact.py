"""Tests for reading patches and naming their rerolled versions."""

import pytest

from reroller.core.errors import InvalidInput
from reroller.patch import PatchArtifact, output_path
from reroller.patch.artifact import extract_date

FORMAT_PATCH = """\
From 3f2a1c0d Mon Sep 17 00:00:00 2001
From: Some One <someone@example.com>
Date: Tue, 9 Jan 2018 10:00:00 +0000
Subject: [PATCH] Fix the thing

---
 module.txt | 2 +-
 1 file changed, 1 insertion(+), 1 deletion(-)

diff --git a/module.txt b/module.txt
index 1111111..2222222 100644
--- a/module.txt
+++ b/module.txt
@@ -1,3 +1,3 @@
 line 1
-line 2
+line 2 patched
 line 3
"""


def test_extract_date_from_header():
    assert extract_date(FORMAT_PATCH) == "Tue, 9 Jan 2018 10:00:00 +0000"


def test_extract_date_missing():
    assert extract_date("diff --git a/x b/x\n+new\n") is None


def test_date_inside_diff_body_ignored():
    content = (
        "diff --git a/notes.txt b/notes.txt\n"
        "--- a/notes.txt\n"
        "+++ b/notes.txt\n"
        "@@ -0,0 +1 @@\n"
        "+Date: Mon, 1 Jan 2001 00:00:00 +0000\n"
    )
    assert extract_date(content) is None


def test_empty_date_header():
    assert extract_date("Date:   \ndiff --git a/x b/x\n") is None


def test_read(tmp_path):
    patch_file = tmp_path / "123.patch"
    patch_file.write_text(FORMAT_PATCH)

    patch = PatchArtifact.read(patch_file)

    assert patch.path == patch_file.resolve()
    assert patch.date == "Tue, 9 Jan 2018 10:00:00 +0000"


def test_read_relative_to_workdir(tmp_path):
    (tmp_path / "123.patch").write_text(FORMAT_PATCH)

    patch = PatchArtifact.read("123.patch", workdir=tmp_path)

    assert patch.path == (tmp_path / "123.patch").resolve()


def test_read_missing(tmp_path):
    with pytest.raises(InvalidInput, match="not found"):
        PatchArtifact.read(tmp_path / "missing.patch")


def test_read_directory(tmp_path):
    with pytest.raises(InvalidInput):
        PatchArtifact.read(tmp_path)


def test_output_path_free(tmp_path):
    assert output_path(tmp_path, "123") == tmp_path / "123-rerolled.patch"


def test_output_path_numbers_existing(tmp_path):
    (tmp_path / "123-rerolled.patch").write_text("old")
    (tmp_path / "123-rerolled-2.patch").write_text("older")

    assert output_path(tmp_path, "123") == tmp_path / "123-rerolled-3.patch"


def test_output_path_force_overwrites(tmp_path):
    (tmp_path / "123-rerolled.patch").write_text("old")

    path = output_path(tmp_path, "123", force=True)

    assert path == tmp_path / "123-rerolled.patch"


def test_output_path_custom_template(tmp_path):
    path = output_path(tmp_path, "42", template="issue-{issue}.diff")

    assert path == tmp_path / "issue-42.diff"
