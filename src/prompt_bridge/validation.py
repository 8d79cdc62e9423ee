"""
Structural checks on generated output, one checker per dialect.

Errors lower the quality score but never block output. Warnings are
appended to the conversion's warnings.
"""

import json
import re
import tomllib
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from .errors import MalformedFrontmatter
from .frontmatter import extract
from .models import Subtype

WINDSURF_MAX_CHARS = 12000
KIRO_INCLUSION_MODES = ("always", "fileMatch", "manual")
OPENCODE_AGENT_MODES = ("primary", "subagent", "all")

_RE_H1 = re.compile(r"^#\s+\S", re.MULTILINE)


@dataclass(frozen=True)
class ValidationResult:
    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


class _Checks:
    """Mutable scratchpad for a single validation run."""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def require(self, data: Dict[str, Any], key: str, where: str = "frontmatter") -> None:
        value = data.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            self.errors.append(f"Missing required field '{key}' in {where}")

    def result(self) -> ValidationResult:
        return ValidationResult(tuple(self.errors), tuple(self.warnings))


def _header(content: str, checks: _Checks) -> Optional[Dict[str, Any]]:
    try:
        header, _ = extract(content)
    except MalformedFrontmatter as e:
        checks.errors.append(str(e))
        return None
    return header.data if header else None


# =============================================================================
# PER-DIALECT CHECKS
# =============================================================================


def _check_claude(content: str, subtype: Optional[Subtype], checks: _Checks) -> None:
    data = _header(content, checks)
    if subtype in (Subtype.AGENT, Subtype.SKILL):
        if data is None:
            checks.errors.append(f"Claude {subtype.value} requires YAML frontmatter")
            return
        checks.require(data, "name")
        checks.require(data, "description")


def _check_cursor(content: str, subtype: Optional[Subtype], checks: _Checks) -> None:
    data = _header(content, checks)
    if subtype is Subtype.SLASH_COMMAND:
        return
    if data is None:
        checks.errors.append("Cursor rules require MDC frontmatter")
        return
    checks.require(data, "description")
    globs = data.get("globs")
    if globs is not None and not isinstance(globs, (str, list)):
        checks.errors.append("'globs' must be a string or a list")
    if "alwaysApply" in data and not isinstance(data["alwaysApply"], bool):
        checks.errors.append("'alwaysApply' must be a boolean")


def _check_continue(content: str, subtype: Optional[Subtype], checks: _Checks) -> None:
    data = _header(content, checks)
    if data is not None and not data.get("name"):
        checks.warnings.append("Continue rule has no 'name' in frontmatter")


def _check_copilot(content: str, subtype: Optional[Subtype], checks: _Checks) -> None:
    data = _header(content, checks)
    if data is not None:
        checks.require(data, "applyTo")


def _check_kiro(content: str, subtype: Optional[Subtype], checks: _Checks) -> None:
    data = _header(content, checks)
    if data is None:
        checks.errors.append("Kiro steering files require YAML frontmatter")
        return
    inclusion = data.get("inclusion")
    if inclusion is None:
        checks.errors.append("Missing required field 'inclusion' in frontmatter")
    elif inclusion not in KIRO_INCLUSION_MODES:
        checks.errors.append(f"Invalid inclusion mode '{inclusion}'")
    if inclusion == "fileMatch":
        checks.require(data, "fileMatchPattern")


def _check_kiro_agent(content: str, subtype: Optional[Subtype], checks: _Checks) -> None:
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        checks.errors.append(f"Invalid JSON: {e}")
        return
    if not isinstance(data, dict):
        checks.errors.append("Kiro agent config must be a JSON object")
        return
    checks.require(data, "name", "agent config")
    if not data.get("prompt"):
        checks.warnings.append("Kiro agent has no prompt")


def _check_gemini(content: str, subtype: Optional[Subtype], checks: _Checks) -> None:
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        checks.errors.append(f"Invalid TOML: {e}")
        return
    prompt = data.get("prompt")
    if not isinstance(prompt, str) or not prompt.strip():
        checks.errors.append("Missing required field 'prompt'")


def _check_droid(content: str, subtype: Optional[Subtype], checks: _Checks) -> None:
    data = _header(content, checks)
    if data is None:
        checks.errors.append("Droid files require YAML frontmatter")
        return
    checks.require(data, "name")
    checks.require(data, "description")


def _check_opencode(content: str, subtype: Optional[Subtype], checks: _Checks) -> None:
    data = _header(content, checks)
    if data is None:
        checks.errors.append("OpenCode files require YAML frontmatter")
        return
    checks.require(data, "description")
    mode = data.get("mode")
    if mode is not None and mode not in OPENCODE_AGENT_MODES:
        checks.errors.append(f"Invalid agent mode '{mode}'")


def _check_windsurf(content: str, subtype: Optional[Subtype], checks: _Checks) -> None:
    if len(content) > WINDSURF_MAX_CHARS:
        checks.warnings.append(
            f"Content exceeds Windsurf's {WINDSURF_MAX_CHARS} character limit ({len(content)} characters)"
        )


def _check_zencoder(content: str, subtype: Optional[Subtype], checks: _Checks) -> None:
    data = _header(content, checks)
    if data is None:
        _check_heading(content, subtype, checks)
        return
    globs = data.get("globs")
    if globs is not None and not isinstance(globs, list):
        checks.errors.append("'globs' must be a list")
    if "alwaysApply" in data and not isinstance(data["alwaysApply"], bool):
        checks.errors.append("'alwaysApply' must be a boolean")


def _check_heading(content: str, subtype: Optional[Subtype], checks: _Checks) -> None:
    if not _RE_H1.search(content):
        checks.warnings.append("Document has no top-level heading")


def _check_canonical(content: str, subtype: Optional[Subtype], checks: _Checks) -> None:
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        checks.errors.append(f"Invalid JSON: {e}")
        return
    body = data.get("content") if isinstance(data, dict) else None
    if not isinstance(body, dict) or body.get("format") != "canonical":
        checks.errors.append("Canonical package must have content.format 'canonical'")


VALIDATORS: Dict[str, Callable[[str, Optional[Subtype], _Checks], None]] = {
    "claude": _check_claude,
    "cursor": _check_cursor,
    "continue": _check_continue,
    "copilot": _check_copilot,
    "kiro": _check_kiro,
    "kiro-agent": _check_kiro_agent,
    "gemini": _check_gemini,
    "droid": _check_droid,
    "opencode": _check_opencode,
    "windsurf": _check_windsurf,
    "ruler": _check_heading,
    "agents.md": _check_heading,
    "aider": _check_heading,
    "trae": _check_heading,
    "zencoder": _check_zencoder,
    "canonical": _check_canonical,
}


def validate_output(dialect: str, content: str, subtype: Optional[Subtype] = None) -> ValidationResult:
    """Run the structural checks for ``dialect`` over generated ``content``."""
    checks = _Checks()
    validator = VALIDATORS.get(dialect)
    if validator is not None:
        validator(content, subtype, checks)
    return checks.result()
