"""Matching a version constraint against the release listing.

Constraints use Terraform's ``required_version`` syntax:

    "1.0.0"               exactly 1.0.0
    ">= 1.2.0, < 2.0.0"   comma-separated comparators, all must hold
    "~> 1.2"              >= 1.2.0, < 2.0.0
    "~> 1.2.3"            >= 1.2.3, < 1.3.0

Partial versions are padded with zeros (``= 1.2`` is ``= 1.2.0``). They are
normalized into ``semantic_version.SimpleSpec`` syntax before matching.

A pre-release only satisfies a constraint that names a pre-release of the
same ``major.minor.patch``; ``>= 1.2.0`` never selects ``1.3.0-rc1``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

import semantic_version

from tfpick.core.result import Err, Ok, Result

__all__ = ["ConstraintError", "parse_constraint", "resolve_by_constraint"]

_CLAUSE_RE = re.compile(r"^(~>|>=|<=|!=|==|=|>|<)?\s*v?(\S+)$")
_PARTIAL_RE = re.compile(r"^(\d+)(?:\.(\d+))?(?:\.(\d+))?(-[0-9A-Za-z.-]+)?$")


@dataclass(frozen=True, slots=True)
class ConstraintError:
    """A constraint or a listed version could not be parsed.

    Attributes:
        value: The offending text
        message: Parser message
    """

    value: str
    message: str

    def __str__(self) -> str:
        return f"{self.message}: {self.value!r}"


def _expand_pessimistic(version: str) -> str:
    m = _PARTIAL_RE.match(version)
    if m is None:
        raise ValueError(f"invalid version in '~>' clause: {version!r}")
    major = int(m.group(1))
    minor = m.group(2)
    patch = m.group(3)
    pre = m.group(4) or ""
    if patch is None:
        lower = f"{major}.{minor or 0}.0"
        return f">={lower},<{major + 1}.0.0"
    return f">={major}.{minor}.{patch}{pre},<{major}.{int(minor) + 1}.0"


def _pad(version: str) -> str:
    m = _PARTIAL_RE.match(version)
    if m is None:
        return version
    major, minor, patch, pre = m.groups()
    return f"{major}.{minor or 0}.{patch or 0}{pre or ''}"


def _normalize(constraint: str) -> str:
    clauses: list[str] = []
    for raw in constraint.split(","):
        clause = raw.strip()
        m = _CLAUSE_RE.match(clause)
        if m is None:
            raise ValueError(f"invalid constraint clause: {clause!r}")
        op, version = m.group(1) or "==", m.group(2)
        if op == "~>":
            clauses.append(_expand_pessimistic(version))
        else:
            clauses.append(f"{'==' if op == '=' else op}{_pad(version)}")
    return ",".join(clauses)


def _prerelease_anchors(normalized: str) -> set[tuple[int, int, int]]:
    """``(major, minor, patch)`` of every clause version carrying a pre-release."""
    anchors: set[tuple[int, int, int]] = set()
    for clause in normalized.split(","):
        m = _PARTIAL_RE.match(clause.lstrip("<>=!"))
        if m is not None and m.group(4):
            anchors.add((int(m.group(1)), int(m.group(2) or 0), int(m.group(3) or 0)))
    return anchors


def parse_constraint(constraint: str) -> semantic_version.SimpleSpec:
    """Parse a Terraform-style constraint.

    Raises:
        ValueError: If the constraint is malformed.
    """
    return semantic_version.SimpleSpec(_normalize(constraint))


def resolve_by_constraint(
    constraint: str | None,
    versions: list[str],
) -> Result[str | None, ConstraintError]:
    """Return the first listed version satisfying ``constraint``.

    Pre-releases are skipped unless the constraint names a pre-release of
    the same ``major.minor.patch``.

    Args:
        constraint: Range expression, or None for "no constraint"
        versions: Candidates in listing order

    Returns:
        Ok(version) on a match, Ok(None) when there is no constraint or
        nothing matches, Err(ConstraintError) when the constraint or any
        inspected version is malformed.
    """
    if constraint is None:
        return Ok(None)

    try:
        normalized = _normalize(constraint)
        spec = semantic_version.SimpleSpec(normalized)
    except ValueError as e:
        return Err(ConstraintError(value=constraint, message=f"invalid version constraint ({e})"))
    anchors = _prerelease_anchors(normalized)

    for version in versions:
        try:
            parsed = semantic_version.Version(version)
        except ValueError as e:
            return Err(ConstraintError(value=version, message=f"invalid version ({e})"))
        if parsed.prerelease and (parsed.major, parsed.minor, parsed.patch) not in anchors:
            continue
        if spec.match(parsed):
            return Ok(version)

    return Ok(None)
