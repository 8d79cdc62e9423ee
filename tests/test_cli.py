"""Tests for the command-line interface."""

import json

import pytest

from prompt_bridge import cli
from prompt_bridge.frontmatter import extract


@pytest.fixture
def run(tmp_path):
    """Run the CLI against a settings file that does not exist."""
    config = tmp_path / "no-config.json"

    def _run(*args):
        return cli.main(["--config", str(config), *args])

    return _run


def test_formats(run, capsys):
    assert run("formats") == 0

    out = capsys.readouterr().out
    assert "cursor" in out
    assert "kiro-agent" in out
    assert "[beta]" in out


def test_no_command_prints_help(run, capsys):
    assert run() == 0
    assert "usage:" in capsys.readouterr().out


def test_convert_writes_file(run, tmp_project):
    source = tmp_project / "code-review.md"

    status = run("convert", str(source), "--from", "claude", "--to", "cursor", "-o", str(tmp_project), "--force")

    written = tmp_project / ".cursor" / "rules" / "code-review.mdc"
    assert status == 0
    assert written.read_text(encoding="utf-8").startswith("---\ndescription: Review pull requests")


def test_convert_respects_declined_overwrite(run, tmp_project, monkeypatch):
    target = tmp_project / ".cursor" / "rules" / "code-review.mdc"
    target.parent.mkdir(parents=True)
    target.write_text("keep me", encoding="utf-8")
    monkeypatch.setattr(cli, "ask_user", lambda question, default=True: False)

    run("convert", str(tmp_project / "code-review.md"), "--from", "claude", "--to", "cursor", "-o", str(tmp_project))

    assert target.read_text(encoding="utf-8") == "keep me"


def test_convert_to_stdout(run, tmp_project, capsys):
    status = run("convert", str(tmp_project / "code-review.md"), "--from", "claude", "--to", "kiro", "--stdout")

    out = capsys.readouterr().out
    assert status == 0
    assert out.startswith("---\ninclusion: always\n---\n")
    assert not (tmp_project / ".kiro").exists()


def test_convert_passes_options(run, tmp_project, capsys):
    run(
        "convert", str(tmp_project / "code-review.md"),
        "--from", "claude", "--to", "cursor", "--stdout",
        "--globs", "src/**/*.py, tests/**",
    )
    header, _ = extract(capsys.readouterr().out)

    assert header.data["globs"] == "src/**/*.py,tests/**"
    assert header.data["alwaysApply"] is False


def test_convert_reports_failures(run, tmp_project):
    status = run("convert", str(tmp_project / "broken.md"), "--from", "kiro", "--to", "cursor", "-o", str(tmp_project), "--force")

    assert status == 1
    assert not (tmp_project / ".cursor").exists()


def test_convert_unknown_format(run, tmp_project, capsys):
    status = run("convert", str(tmp_project / "code-review.md"), "--from", "notepad", "--to", "cursor")

    assert status == 1
    assert "Unknown format: notepad" in capsys.readouterr().out


def test_default_target_from_settings(tmp_project, tmp_path):
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"default_target": "windsurf"}), encoding="utf-8")

    status = cli.main([
        "--config", str(config),
        "convert", str(tmp_project / "code-review.md"), "--from", "claude", "-o", str(tmp_project), "--force",
    ])

    assert status == 0
    assert (tmp_project / ".windsurf" / "rules" / "code-review.md").exists()


def test_inspect_prints_canonical_json(run, tmp_project, capsys):
    assert run("inspect", str(tmp_project / "code-review.md"), "--from", "claude") == 0

    data = json.loads(capsys.readouterr().out)
    assert data["name"] == "code-review"
    assert data["content"]["format"] == "canonical"


def test_inspect_parse_error(run, tmp_project, capsys):
    assert run("inspect", str(tmp_project / "broken.md"), "--from", "kiro") == 1
    assert "Missing required field 'frontmatter'" in capsys.readouterr().out
