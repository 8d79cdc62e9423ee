"""
Kiro Agent Converter
Converts between Kiro custom agent JSON and the canonical package.

Output structure:
- .kiro/agents/*.json

JSON keys: name, description, prompt, tools, allowedTools, toolAliases,
toolsSettings, mcpServers, resources, hooks, model, useLegacyMcpJson.
The prompt is the markdown body; ``file://`` prompts are kept as a pointer.

Reference: https://kiro.dev/docs/cli/custom-agents/configuration-reference/
"""

import json
from typing import Any, Dict, Optional

from ..core.converter import BaseConverter, FormatInfo, converter_registry
from ..core.package import build_package
from ..errors import MissingRequiredField, ParseError
from ..frontmatter import as_list
from ..markdown import parse_markdown_body
from ..models import (
    CanonicalPackage,
    ConversionOptions,
    ConversionResult,
    Format,
    InstructionsSection,
    KiroAgentExtension,
    PackageMetadata,
    Subtype,
    ToolsSection,
)
from ..render import DialectProfile, collect_tools, plain_text
from ..scoring import new_report

PROFILE = DialectProfile("kiro", "Kiro Agent", unsupported=frozenset({"hook"}), header_only=frozenset({"tools"}))

FILE_PROMPT_PREFIX = "file://"
TEXT_FIELDS = ("name", "description", "prompt", "model")
LIST_FIELDS = ("tools", "allowedTools", "resources")


def from_kiro_agent(content: str, metadata: PackageMetadata, **_options) -> CanonicalPackage:
    try:
        config = json.loads(content)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid agent JSON: {e}", "kiro-agent") from e
    if not isinstance(config, dict):
        raise ParseError("Agent config must be a JSON object", "kiro-agent")

    for key in TEXT_FIELDS:
        if config.get(key) is not None and not isinstance(config[key], str):
            raise ParseError(f"'{key}' must be a string, got {type(config[key]).__name__}", "kiro-agent")
    for key in LIST_FIELDS:
        if config.get(key) is not None and not isinstance(config[key], list):
            raise ParseError(f"'{key}' must be a list, got {type(config[key]).__name__}", "kiro-agent")

    name = config.get("name") or metadata.name or metadata.id
    if not name:
        raise MissingRequiredField("name", "kiro-agent")

    prompt = config.get("prompt") or ""
    description = config.get("description")
    if prompt.startswith(FILE_PROMPT_PREFIX):
        sections = [InstructionsSection("Instructions", f"Loads instructions from: {prompt}")]
    else:
        # Without a description field, the prompt intro stands in for it
        parsed = parse_markdown_body(prompt, description_from_preamble=not description)
        sections = list(parsed.sections)
        description = description or parsed.description

    tools = as_list(config.get("tools"))
    if tools:
        sections.append(ToolsSection(tools))

    extension = KiroAgentExtension(
        tools=tools,
        allowed_tools=as_list(config.get("allowedTools")),
        tool_aliases=config.get("toolAliases"),
        tools_settings=config.get("toolsSettings"),
        mcp_servers=config.get("mcpServers"),
        resources=as_list(config.get("resources")),
        hooks=config.get("hooks"),
        model=config.get("model"),
        use_legacy_mcp_json=config.get("useLegacyMcpJson"),
    )
    return build_package(
        metadata,
        Format.KIRO,
        sections,
        name=name,
        description=description,
        subtype=Subtype.AGENT,
        extension=extension,
        source_format="kiro-agent",
    )


def _agent_config(pkg: CanonicalPackage, prompt: str) -> Dict[str, Any]:
    meta = pkg.metadata_section
    extension = (meta.extension(KiroAgentExtension) if meta else None) or KiroAgentExtension()
    tools = list(collect_tools(pkg)) or list(extension.tools)
    config = {
        "name": pkg.name,
        "description": pkg.description or None,
        "prompt": prompt or None,
        "tools": tools or None,
        "allowedTools": list(extension.allowed_tools) or None,
        "toolAliases": extension.tool_aliases,
        "toolsSettings": extension.tools_settings,
        "mcpServers": extension.mcp_servers,
        "resources": list(extension.resources) or None,
        "hooks": extension.hooks,
        "model": extension.model,
        "useLegacyMcpJson": extension.use_legacy_mcp_json,
    }
    return {k: v for k, v in config.items() if v is not None}


def to_kiro_agent(pkg: CanonicalPackage, options: Optional[ConversionOptions] = None) -> ConversionResult:
    report = new_report("kiro-agent", options)
    if pkg.subtype is Subtype.SLASH_COMMAND:
        report.incompatible_subtype("Slash commands are not supported by Kiro agents")
    elif pkg.subtype is Subtype.SKILL:
        report.partial_subtype("Skills are converted to agents, which may not be fully supported")

    prompt = plain_text(pkg, PROFILE, report)
    content = json.dumps(_agent_config(pkg, prompt), indent=2, ensure_ascii=False) + "\n"
    return report.finish(content, pkg.subtype)


@converter_registry.register
class KiroAgentConverter(BaseConverter):
    format_info = FormatInfo(
        name="kiro-agent",
        display_name="Kiro Agent",
        output_dir=".kiro/agents",
        extension=".json",
        status="beta",
    )

    def parse(self, content, metadata, **options):
        return from_kiro_agent(content, metadata)

    def serialize(self, pkg, options=None):
        return to_kiro_agent(pkg, options)
