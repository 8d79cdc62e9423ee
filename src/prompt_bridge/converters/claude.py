"""
Claude Code Converter
Converts between Claude Code markdown and the canonical package.

Output structure:
- .claude/agents/*.md (agents: name, description, tools, model)
- .claude/skills/<name>/SKILL.md (skills: name, description)
- .claude/commands/*.md (slash commands: description, allowed-tools, argument-hint)

Reference: https://docs.anthropic.com/en/docs/claude-code/sub-agents
"""

import logging
from typing import Any, Dict, Optional

from ..core.converter import BaseConverter, FormatInfo, converter_registry
from ..core.package import build_package, coerce_subtype
from ..frontmatter import as_list, extract, render_yaml_header, unknown_fields, with_extra
from ..markdown import parse_markdown_body
from ..models import (
    CanonicalPackage,
    ClaudeExtension,
    ConversionOptions,
    ConversionResult,
    Format,
    PackageMetadata,
    Subtype,
    ToolsSection,
)
from ..render import DialectProfile, collect_tools, render_markdown, with_header
from ..scoring import new_report

logger = logging.getLogger(__name__)

PROFILE = DialectProfile("claude", "Claude", unsupported=frozenset({"hook"}), header_only=frozenset({"tools"}))

# Legacy marker fields, checked in this order. The first one present wins.
SUBTYPE_FIELDS = ("type", "agentType", "skillType", "commandType")
HEADER_FIELDS = SUBTYPE_FIELDS + ("name", "description", "version", "tools", "allowed-tools", "model", "argument-hint")
SUBTYPE_BY_FIELD = {
    "agentType": Subtype.AGENT,
    "skillType": Subtype.SKILL,
    "commandType": Subtype.SLASH_COMMAND,
}
SUBTYPE_ALIASES = {
    "agent": Subtype.AGENT,
    "skill": Subtype.SKILL,
    "command": Subtype.SLASH_COMMAND,
    "slash-command": Subtype.SLASH_COMMAND,
    "rule": Subtype.RULE,
}

OUTPUT_DIRS = {
    Subtype.AGENT: ".claude/agents",
    Subtype.SKILL: ".claude/skills",
    Subtype.SLASH_COMMAND: ".claude/commands",
}


def detect_subtype(frontmatter: Dict[str, Any]) -> Subtype:
    for key in SUBTYPE_FIELDS:
        value = frontmatter.get(key)
        if not value:
            continue
        alias = SUBTYPE_ALIASES.get(str(value).lower())
        if alias:
            return alias
        if key in SUBTYPE_BY_FIELD:
            return SUBTYPE_BY_FIELD[key]
    return Subtype.RULE


# =============================================================================
# PARSE
# =============================================================================


def from_claude(content: str, metadata: PackageMetadata, subtype: Optional[Subtype] = None) -> CanonicalPackage:
    """Parse a Claude agent, skill or command file. An explicit ``subtype`` beats frontmatter markers."""
    header, body = extract(content, dialect="claude")
    data = header.data if header else {}
    parsed = parse_markdown_body(body)

    sections = list(parsed.sections)
    tools = as_list(data.get("tools")) or as_list(data.get("allowed-tools"))
    if tools:
        sections.append(ToolsSection(tools))

    extension = ClaudeExtension(
        model=data.get("model"),
        argument_hint=data.get("argument-hint"),
        extra=unknown_fields(data, HEADER_FIELDS),
    )
    resolved = coerce_subtype(subtype) if subtype else detect_subtype(data)
    logger.debug("Claude document %s parsed as %s", metadata.id, resolved.value)

    return build_package(
        metadata,
        Format.CLAUDE,
        sections,
        title=parsed.title,
        name=data.get("name"),
        description=data.get("description"),
        icon=parsed.icon,
        version=data.get("version"),
        subtype=resolved,
        extension=extension if extension != ClaudeExtension() else None,
    )


# =============================================================================
# SERIALIZE
# =============================================================================


def _header_fields(pkg: CanonicalPackage) -> Dict[str, Any]:
    meta = pkg.metadata_section
    extension = (meta.extension(ClaudeExtension) if meta else None) or ClaudeExtension()
    tools = ", ".join(collect_tools(pkg)) or None
    description = pkg.description or None

    if pkg.subtype is Subtype.SLASH_COMMAND:
        fields = {
            "description": description,
            "allowed-tools": tools,
            "argument-hint": extension.argument_hint,
        }
    else:
        fields = {
            "name": pkg.name,
            "description": description,
            "tools": tools,
            "model": extension.model,
        }
    return with_extra(fields, extension.extra)


def to_claude(pkg: CanonicalPackage, options: Optional[ConversionOptions] = None) -> ConversionResult:
    report = new_report("claude", options)
    body = render_markdown(pkg, PROFILE, report)
    content = with_header(render_yaml_header(_header_fields(pkg)), body)
    return report.finish(content, pkg.subtype)


@converter_registry.register
class ClaudeConverter(BaseConverter):
    format_info = FormatInfo(
        name="claude",
        display_name="Claude Code",
        output_dir=".claude",
        aliases=("claude-code",),
    )

    def parse(self, content, metadata, **options):
        return from_claude(content, metadata, options.get("subtype"))

    def serialize(self, pkg, options=None):
        return to_claude(pkg, options)

    def output_path(self, pkg):
        folder = OUTPUT_DIRS.get(pkg.subtype, ".claude/rules")
        if pkg.subtype is Subtype.SKILL:
            return f"{folder}/{pkg.name}/SKILL.md"
        return f"{folder}/{pkg.name}.md"
