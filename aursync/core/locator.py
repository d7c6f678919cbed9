"""Checksum declaration locator.

Finds ``sha<N>sums_<arch>=('<value>' ...)`` declarations in a PKGBUILD and
reports the span of the first quoted value of each.  The scan is lexical,
not a shell parse: the token, an ``_`` suffix delimiter, the suffix up to
``=`` on the same line, then the first pair of quote characters inside the
value.  The value of an array declaration ends at its closing ``)``; a
scalar value ends at the end of the line.  Quotes outside that region are
never considered.

Declarations that cannot be tied to an architecture are skipped and
reported as ``FieldIssue`` records; they never abort the scan.
"""

from __future__ import annotations

import logging
import re

from pydantic import BaseModel, ConfigDict

from aursync.core.arch import classify
from aursync.models.descriptor import ChecksumField, FieldIssue, FieldIssueKind

logger = logging.getLogger(__name__)

_SUM_TOKEN_RE = re.compile(r"sha([0-9]+)sums")
_SUFFIX_DELIMITER = "_"
_ASSIGNMENT = "="
_QUOTE_RE = re.compile(r"[\"']")
_LINE_END_RE = re.compile(r"[\r\n]")
_ARRAY_OPEN = "("
_ARRAY_CLOSE = ")"


class LocatorReport(BaseModel):
    """Fields located in one descriptor plus the declarations skipped."""

    model_config = ConfigDict(frozen=True)

    fields: list[ChecksumField] = []
    issues: list[FieldIssue] = []


def _value_end(text: str, start: int, line_end: int) -> int:
    """End of the value assigned at *start*, or -1 for an unclosed array."""
    if text.startswith(_ARRAY_OPEN, start):
        return text.find(_ARRAY_CLOSE, start + 1)
    return line_end


def locate_checksum_fields(text: str, package_name: str = "") -> LocatorReport:
    """Scan *text* for per-architecture checksum declarations.

    Fields are returned in text order and are not deduplicated: two
    declarations for the same architecture yield two fields.
    """
    prefix = f"{package_name}: " if package_name else ""
    fields: list[ChecksumField] = []
    issues: list[FieldIssue] = []

    for match in _SUM_TOKEN_RE.finditer(text):
        token_end = match.end()

        if text[token_end:token_end + 1] != _SUFFIX_DELIMITER:
            issue = FieldIssue(
                kind=FieldIssueKind.UNSUPPORTED_FIELD,
                label=match.group(0),
                message="signature definition without explicit arches are not supported",
            )
            logger.warning("%s%s", prefix, issue.message)
            issues.append(issue)
            continue

        line_end_match = _LINE_END_RE.search(text, token_end)
        line_end = line_end_match.start() if line_end_match else len(text)

        eq = text.find(_ASSIGNMENT, token_end, line_end)
        if eq < 0:
            issue = FieldIssue(
                kind=FieldIssueKind.UNCLASSIFIED_ARCHITECTURE,
                label=match.group(0),
                message=f"Arch of '{match.group(0)}' not recognised: no assignment found.",
            )
            logger.warning("%s%s", prefix, issue.message)
            issues.append(issue)
            continue

        suffix = text[token_end:eq]
        arch = classify(suffix)
        if arch is None:
            issue = FieldIssue(
                kind=FieldIssueKind.UNCLASSIFIED_ARCHITECTURE,
                label=suffix,
                message=f"Arch '{suffix}' not recognised.",
            )
            logger.warning("%s%s", prefix, issue.message)
            issues.append(issue)
            continue

        value_end = _value_end(text, eq + 1, line_end)
        opening = _QUOTE_RE.search(text, eq + 1, value_end) if value_end >= 0 else None
        closing = _QUOTE_RE.search(text, opening.end(), value_end) if opening else None
        if opening is None or closing is None:
            issue = FieldIssue(
                kind=FieldIssueKind.UNSUPPORTED_FIELD,
                label=match.group(0) + suffix,
                message=f"'{match.group(0)}{suffix}' has no quoted checksum value.",
            )
            logger.warning("%s%s", prefix, issue.message)
            issues.append(issue)
            continue

        field = ChecksumField(
            arch=arch,
            algorithm=match.group(1),
            value_start=opening.end(),
            value_end=closing.start(),
        )
        logger.info(
            "%sFound arch sum '%s' with sum %s",
            prefix,
            arch.value,
            text[field.value_start:field.value_end],
        )
        fields.append(field)

    if not fields and not issues:
        logger.info("%sno signature fields", prefix)

    return LocatorReport(fields=fields, issues=issues)
