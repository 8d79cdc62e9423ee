"""Serialize, parse back and serialize again: the second pass must not drift."""

import pytest

from prompt_bridge.converters import from_windsurf
from prompt_bridge.core.converter import converter_registry

ALL_DIALECTS = [
    "claude",
    "cursor",
    "continue",
    "windsurf",
    "copilot",
    "kiro",
    "kiro-agent",
    "gemini",
    "droid",
    "opencode",
    "ruler",
    "agents.md",
    "aider",
    "trae",
    "zencoder",
    "canonical",
]


def _round_trip(pkg, dialect, metadata):
    converter = converter_registry.require(dialect)
    first = converter.serialize(pkg).content
    second = converter.serialize(converter.parse(first, metadata)).content
    return first, second


@pytest.mark.parametrize("dialect", ALL_DIALECTS)
def test_standards_are_stable(dialect, standards_body, standards_metadata):
    pkg = from_windsurf(standards_body, standards_metadata)

    first, second = _round_trip(pkg, dialect, standards_metadata)

    assert second == first


@pytest.mark.parametrize("dialect", ALL_DIALECTS)
def test_claude_skill_is_stable(dialect, claude_package, metadata):
    """Persona, tools and icon survive (or are dropped) the same way twice."""
    first, second = _round_trip(claude_package, dialect, metadata)

    assert second == first


def test_claude_round_trip_is_lossless(claude_package, metadata):
    """Everything a Claude document carries comes back from its own output."""
    converter = converter_registry.require("claude")
    reparsed = converter.parse(converter.serialize(claude_package).content, metadata)

    assert reparsed == claude_package


def test_standards_round_trip_keeps_rules(standards_body, standards_metadata):
    pkg = from_windsurf(standards_body, standards_metadata)
    first, _ = _round_trip(pkg, "cursor", standards_metadata)
    again = converter_registry.require("cursor").parse(first, standards_metadata)

    rules = again.content.body[0]
    assert [r.content for r in rules.items] == ["Write a test for every bug fix", "Prefer fixtures over globals"]
    assert rules.items[0].rationale == "Regressions stay fixed"


@pytest.mark.parametrize(
    "dialect",
    [
        "claude",
        "cursor",
        "continue",
        "windsurf",
        "copilot",
        "kiro",
        "kiro-agent",
        "gemini",
        "ruler",
        "agents.md",
        "aider",
        "trae",
        "zencoder",
        "canonical",
    ],
)
def test_second_pass_scores_100(dialect, standards_body, standards_metadata):
    """Nothing lossy in the source, so the re-serialized output is clean."""
    converter = converter_registry.require(dialect)
    pkg = from_windsurf(standards_body, standards_metadata)
    reparsed = converter.parse(converter.serialize(pkg).content, standards_metadata)

    result = converter.serialize(reparsed)

    assert result.quality_score == 100
    assert result.lossy_conversion is False
