"""Tests for the batch conversion service."""

from pathlib import Path

import pytest

from prompt_bridge.errors import UnknownFormatError
from prompt_bridge.services import ConversionJob, convert_batch, convert_one, display_batch, package_id_for


@pytest.mark.parametrize(
    "path, expected",
    [
        (".github/instructions/api.instructions.md", "api"),
        (".github/prompts/explain.prompt.md", "explain"),
        (".cursor/rules/style.mdc", "style"),
        (".gemini/commands/test.toml", "test"),
        (".claude/skills/review/SKILL.md", "review"),
        ("acme/AGENTS.md", "acme"),
        ("notes.txt", "notes.txt"),
    ],
)
def test_package_id_for(path, expected):
    assert package_id_for(Path(path)) == expected


def test_convert_one(tmp_project):
    outcome = convert_one(ConversionJob(tmp_project / "code-review.md", "claude", "cursor"))

    assert outcome.ok
    assert outcome.package.name == "code-review"
    assert outcome.output_path == ".cursor/rules/code-review.mdc"
    assert outcome.result.quality_score == 90


def test_convert_one_missing_file(tmp_path):
    outcome = convert_one(ConversionJob(tmp_path / "missing.md", "claude", "cursor"))

    assert not outcome.ok
    assert "Could not read" in outcome.error


def test_convert_one_parse_error(tmp_project):
    outcome = convert_one(ConversionJob(tmp_project / "broken.md", "kiro", "cursor"))

    assert not outcome.ok
    assert outcome.package is None
    assert "frontmatter" in outcome.error


def test_author_flows_into_package(tmp_project):
    outcome = convert_one(ConversionJob(tmp_project / "code-review.md", "claude", "ruler", author="Jane Doe"))

    assert str(outcome.package.author) == "Jane Doe"
    assert "<!-- Author: Jane Doe -->" in outcome.result.content


def test_batch_keeps_job_order(tmp_project):
    jobs = [
        ConversionJob(tmp_project / "code-review.md", "claude", "cursor"),
        ConversionJob(tmp_project / "broken.md", "claude", "cursor"),
    ]

    report = convert_batch(jobs, max_workers=4)

    assert [o.job for o in report.outcomes] == jobs
    assert len(report.succeeded) == 2
    assert report.average_score == 95
    assert report.stopped is False


def test_batch_collects_failures(tmp_project):
    jobs = [
        ConversionJob(tmp_project / "broken.md", "kiro", "cursor"),
        ConversionJob(tmp_project / "code-review.md", "claude", "cursor"),
    ]

    report = convert_batch(jobs)

    assert len(report.failed) == 1
    assert len(report.succeeded) == 1
    assert report.failed[0].job.source.name == "broken.md"


def test_batch_stop_on_error(tmp_project):
    jobs = [
        ConversionJob(tmp_project / "broken.md", "kiro", "cursor"),
        ConversionJob(tmp_project / "code-review.md", "claude", "cursor"),
    ]

    report = convert_batch(jobs, max_workers=1, stop_on_error=True)

    assert len(report.outcomes) == 1
    assert report.stopped is True


def test_batch_rejects_unknown_format_up_front(tmp_project):
    with pytest.raises(UnknownFormatError):
        convert_batch([ConversionJob(tmp_project / "code-review.md", "claude", "notepad")])


def test_empty_batch():
    report = convert_batch([])

    assert report.outcomes == []
    assert report.average_score is None


def test_display_batch(tmp_project, capsys):
    jobs = [
        ConversionJob(tmp_project / "code-review.md", "claude", "cursor"),
        ConversionJob(tmp_project / "broken.md", "kiro", "cursor"),
    ]

    display_batch(convert_batch(jobs), verbose=True)
    out = capsys.readouterr().out

    assert ".cursor/rules/code-review.mdc" in out
    assert "(lossy)" in out
    assert "Tools section skipped (not supported by Cursor)" in out
    assert "1/2 converted" in out
    assert "average score 90" in out


def test_batch_survives_mistyped_agent_config(tmp_path):
    (tmp_path / "bad.json").write_text('{"name": "bad", "prompt": ["a"]}', encoding="utf-8")
    (tmp_path / "good.json").write_text('{"name": "good", "prompt": "## Rules\\n\\n- Be kind"}', encoding="utf-8")
    jobs = [
        ConversionJob(tmp_path / "bad.json", "kiro-agent", "claude"),
        ConversionJob(tmp_path / "good.json", "kiro-agent", "claude"),
    ]

    report = convert_batch(jobs)

    assert [o.ok for o in report.outcomes] == [False, True]
    assert "'prompt' must be a string" in report.outcomes[0].error
