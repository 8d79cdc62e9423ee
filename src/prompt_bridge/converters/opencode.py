"""
OpenCode Converter
Converts between OpenCode agents/commands and the canonical package.

Output structure:
- .opencode/agents/*.md (agents with frontmatter: mode, tools, permission)
- .opencode/commands/*.md (custom commands)

Reference: https://opencode.ai/docs/agents/
           https://opencode.ai/docs/commands/
"""

from typing import Any, Dict, Optional

from ..core.converter import BaseConverter, FormatInfo, converter_registry
from ..core.package import build_package, coerce_subtype
from ..frontmatter import extract, render_yaml_header, unknown_fields, with_extra
from ..markdown import parse_markdown_body
from ..models import (
    CanonicalPackage,
    ConversionOptions,
    ConversionResult,
    Format,
    OpenCodeExtension,
    PackageMetadata,
    Subtype,
    ToolsSection,
)
from ..render import DialectProfile, collect_tools, render_markdown, with_header
from ..scoring import new_report

PROFILE = DialectProfile("opencode", "OpenCode", unsupported=frozenset({"hook"}), header_only=frozenset({"tools"}))

DEFAULT_AGENT_MODE = "subagent"
HEADER_FIELDS = (
    "description", "mode", "model", "temperature", "permission", "tools", "disable", "hidden", "agent", "subtask"
)


def _enabled_tools(tools: Any) -> tuple:
    """OpenCode tools are a name -> enabled map; older files use a plain list."""
    if isinstance(tools, dict):
        return tuple(str(name) for name, enabled in tools.items() if enabled)
    if isinstance(tools, (list, tuple)):
        return tuple(str(name) for name in tools)
    return ()


def from_opencode(content: str, metadata: PackageMetadata, subtype: Optional[Subtype] = None) -> CanonicalPackage:
    header, body = extract(content, dialect="opencode")
    data = header.data if header else {}
    parsed = parse_markdown_body(body)

    tools = data.get("tools")
    sections = list(parsed.sections)
    enabled = _enabled_tools(tools)
    if enabled:
        sections.append(ToolsSection(enabled))

    extension = OpenCodeExtension(
        mode=data.get("mode"),
        model=data.get("model"),
        temperature=data.get("temperature"),
        permission=data.get("permission"),
        tools=tools if isinstance(tools, dict) else None,
        disable=data.get("disable"),
        hidden=data.get("hidden"),
        agent=data.get("agent"),
        subtask=data.get("subtask"),
        extra=unknown_fields(data, HEADER_FIELDS),
    )
    # Agents always carry a mode; anything without one is a command
    default = Subtype.AGENT if extension.mode else Subtype.SLASH_COMMAND

    return build_package(
        metadata,
        Format.OPENCODE,
        sections,
        title=parsed.title,
        description=data.get("description"),
        icon=parsed.icon,
        subtype=coerce_subtype(subtype, default),
        extension=extension if extension != OpenCodeExtension() else None,
    )


# =============================================================================
# FRONTMATTER GENERATION
# =============================================================================


def generate_agent_frontmatter(pkg: CanonicalPackage, extension: OpenCodeExtension) -> Dict[str, Any]:
    tools = extension.tools
    if not tools:
        tools = {name: True for name in collect_tools(pkg)} or None
    return {
        "description": pkg.description,
        "mode": extension.mode or DEFAULT_AGENT_MODE,
        "model": extension.model,
        "temperature": extension.temperature,
        "tools": tools,
        "permission": extension.permission,
        "disable": extension.disable,
        "hidden": extension.hidden,
    }


def generate_command_frontmatter(pkg: CanonicalPackage, extension: OpenCodeExtension) -> Dict[str, Any]:
    return {
        "description": pkg.description,
        "agent": extension.agent,
        "subtask": extension.subtask,
        "model": extension.model,
    }


def to_opencode(pkg: CanonicalPackage, options: Optional[ConversionOptions] = None) -> ConversionResult:
    report = new_report("opencode", options)
    meta = pkg.metadata_section
    extension = (meta.extension(OpenCodeExtension) if meta else None) or OpenCodeExtension()

    if pkg.subtype is Subtype.SLASH_COMMAND:
        fields = generate_command_frontmatter(pkg, extension)
    else:
        fields = generate_agent_frontmatter(pkg, extension)

    body = render_markdown(pkg, PROFILE, report)
    header = render_yaml_header(with_extra(fields, extension.extra))
    return report.finish(with_header(header, body), pkg.subtype)


@converter_registry.register
class OpenCodeConverter(BaseConverter):
    format_info = FormatInfo(
        name="opencode",
        display_name="OpenCode",
        output_dir=".opencode/agents",
        aliases=("open-code",),
    )

    def parse(self, content, metadata, **options):
        return from_opencode(content, metadata, options.get("subtype"))

    def serialize(self, pkg, options=None):
        return to_opencode(pkg, options)

    def output_path(self, pkg):
        if pkg.subtype is Subtype.SLASH_COMMAND:
            return f".opencode/commands/{pkg.name}.md"
        return super().output_path(pkg)
