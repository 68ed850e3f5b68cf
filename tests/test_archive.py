"""Tests for ZIP packages."""

import zipfile

import pytest

from mrreports.core.exceptions import ArchiveError
from mrreports.storage.archive import create_zip_archive, extract_zip_archive


def test_create_and_extract(tmp_path):
    source = tmp_path / "Acme"
    (source / "interactions").mkdir(parents=True)
    (source / "Acme_report.docx").write_bytes(b"docx")
    (source / "interactions" / "call.pdf").write_bytes(b"pdf")

    archive = create_zip_archive(source, tmp_path / "out" / "Acme.zip")
    with zipfile.ZipFile(archive) as package:
        assert sorted(package.namelist()) == ["Acme_report.docx", "interactions/call.pdf"]

    extracted = extract_zip_archive(archive, tmp_path / "unpacked")
    assert sorted(p.name for p in extracted) == ["Acme_report.docx", "call.pdf"]
    assert (tmp_path / "unpacked" / "interactions" / "call.pdf").read_bytes() == b"pdf"


def test_missing_source(tmp_path):
    with pytest.raises(ArchiveError):
        create_zip_archive(tmp_path / "missing", tmp_path / "out.zip")


def test_unsafe_member(tmp_path):
    archive = tmp_path / "evil.zip"
    with zipfile.ZipFile(archive, "w") as package:
        package.writestr("../escape.txt", "gotcha")

    with pytest.raises(ArchiveError):
        extract_zip_archive(archive, tmp_path / "target")
    assert not (tmp_path / "escape.txt").exists()


def test_not_a_zip(tmp_path):
    bogus = tmp_path / "bogus.zip"
    bogus.write_text("plain text")
    with pytest.raises(ArchiveError):
        extract_zip_archive(bogus, tmp_path / "target")
