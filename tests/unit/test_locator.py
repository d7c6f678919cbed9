"""Tests for the checksum declaration locator."""

from __future__ import annotations

import logging

import pytest

from aursync.core.locator import locate_checksum_fields
from aursync.models.arch import Arch
from aursync.models.descriptor import FieldIssueKind


def _values(text: str) -> list[str]:
    report = locate_checksum_fields(text)
    return [text[f.value_start:f.value_end] for f in report.fields]


class TestLocateChecksumFields:
    def test_locates_both_architectures(self, sample_pkgbuild: str):
        report = locate_checksum_fields(sample_pkgbuild)
        assert [f.arch for f in report.fields] == [Arch.X86_64, Arch.AARCH64]
        assert _values(sample_pkgbuild) == ["OLD1", "OLD2"]
        assert report.issues == []

    def test_algorithm_recorded(self):
        report = locate_checksum_fields("sha512sums_i686=('abc')\n")
        assert report.fields[0].algorithm == "512"
        assert report.fields[0].label == "sha512sums_i686"

    def test_single_and_double_quotes(self):
        text = "sha256sums_x86_64=(\"aa\")\nsha256sums_armv7h=('bb')\n"
        assert _values(text) == ["aa", "bb"]

    def test_multiline_array_takes_first_value(self):
        text = "sha256sums_aarch64=(\n    'first'\n    'second'\n)\n"
        assert _values(text) == ["first"]

    def test_empty_value(self):
        text = "sha256sums_x86_64=('')\n"
        report = locate_checksum_fields(text)
        assert len(report.fields) == 1
        assert report.fields[0].value_start == report.fields[0].value_end

    def test_duplicates_not_merged(self):
        text = "sha256sums_x86_64=('a')\nsha256sums_x86_64=('b')\n"
        report = locate_checksum_fields(text)
        assert [f.arch for f in report.fields] == [Arch.X86_64, Arch.X86_64]
        assert _values(text) == ["a", "b"]

    def test_generic_declaration_is_unsupported(self):
        text = "sha256sums=('SKIP')\nsha256sums_x86_64=('abc')\n"
        report = locate_checksum_fields(text)
        assert _values(text) == ["abc"]
        assert [i.kind for i in report.issues] == [FieldIssueKind.UNSUPPORTED_FIELD]
        assert "without explicit arches" in report.issues[0].message

    def test_unknown_suffix_is_unclassified(self):
        text = "sha256sums_riscv64=('abc')\n"
        report = locate_checksum_fields(text)
        assert report.fields == []
        assert report.issues[0].kind == FieldIssueKind.UNCLASSIFIED_ARCHITECTURE
        assert report.issues[0].label == "_riscv64"

    def test_no_assignment(self):
        report = locate_checksum_fields("echo sha256sums_x86_64\n")
        assert report.fields == []
        assert report.issues[0].kind == FieldIssueKind.UNCLASSIFIED_ARCHITECTURE

    def test_unquoted_value_is_skipped(self):
        report = locate_checksum_fields("sha256sums_x86_64=(abc)\n")
        assert report.fields == []
        assert report.issues[0].kind == FieldIssueKind.UNSUPPORTED_FIELD

    def test_no_fields(self):
        report = locate_checksum_fields("pkgname=foo\npkgver=1\n")
        assert report.fields == []
        assert report.issues == []

    def test_other_checksum_families_ignored(self):
        text = "md5sums_x86_64=('m')\nb2sums_x86_64=('b')\nsha1sums_x86_64=('s')\n"
        assert _values(text) == ["s"]

    def test_issues_logged_with_package_name(self, caplog: pytest.LogCaptureFixture):
        with caplog.at_level(logging.WARNING, logger="aursync.core.locator"):
            locate_checksum_fields("sha256sums=('x')\n", "foo-bin")
        assert any(r.message.startswith("foo-bin: ") for r in caplog.records)


class TestValueBounds:
    """A quoted value is only taken from inside its own declaration."""

    def test_unquoted_array_does_not_borrow_later_quotes(self):
        text = (
            "sha256sums_aarch64=('OLD2')\n"
            "sha256sums_x86_64=(SKIP)\n"
            "\n"
            "package() {\n"
            '    install -Dm755 foo "$pkgdir/usr/bin/foo"\n'
            "}\n"
        )
        report = locate_checksum_fields(text)
        assert [f.arch for f in report.fields] == [Arch.AARCH64]
        assert _values(text) == ["OLD2"]
        assert [i.kind for i in report.issues] == [FieldIssueKind.UNSUPPORTED_FIELD]
        assert report.issues[0].label == "sha256sums_x86_64"

    def test_unquoted_first_then_quoted(self):
        text = "sha256sums_x86_64=(SKIP)\nsha256sums_aarch64=('OLD2')\n"
        report = locate_checksum_fields(text)
        assert [f.arch for f in report.fields] == [Arch.AARCH64]
        assert _values(text) == ["OLD2"]
        assert len(report.issues) == 1

    def test_quote_after_closing_paren_ignored(self):
        report = locate_checksum_fields("sha256sums_x86_64=(SKIP) # 'note'\n")
        assert report.fields == []
        assert report.issues[0].kind == FieldIssueKind.UNSUPPORTED_FIELD

    def test_unquoted_scalar_stops_at_line_end(self):
        report = locate_checksum_fields("sha256sums_x86_64=SKIP\nurl='https://x'\n")
        assert report.fields == []
        assert report.issues[0].kind == FieldIssueKind.UNSUPPORTED_FIELD

    def test_quoted_scalar(self):
        assert _values("sha256sums_x86_64='abc'\n") == ["abc"]

    def test_unclosed_array(self):
        report = locate_checksum_fields("sha256sums_x86_64=(\n  SKIP\n")
        assert report.fields == []
        assert report.issues[0].kind == FieldIssueKind.UNSUPPORTED_FIELD

    def test_assignment_must_be_on_the_same_line(self):
        report = locate_checksum_fields("echo sha256sums_x86_64\nfoo='bar'\n")
        assert report.fields == []
        assert report.issues[0].kind == FieldIssueKind.UNCLASSIFIED_ARCHITECTURE
