"""
Factory Droid Converter
Converts between Factory Droid skills/commands and the canonical package.

Output structure:
- .factory/skills/<name>/SKILL.md (skills)
- .factory/commands/*.md (slash commands, with argument-hint)

Frontmatter: name, description, argument-hint, allowed-tools

Reference: https://docs.factory.ai/cli/configuration/custom-slash-commands
"""

from typing import Any, Dict, Optional

from ..core.converter import BaseConverter, FormatInfo, converter_registry
from ..core.package import build_package, coerce_subtype
from ..frontmatter import as_list, extract, render_yaml_header, unknown_fields, with_extra
from ..markdown import parse_markdown_body
from ..models import (
    CanonicalPackage,
    ConversionOptions,
    ConversionResult,
    DroidExtension,
    Format,
    PackageMetadata,
    Subtype,
    ToolsSection,
)
from ..render import DialectProfile, collect_tools, render_markdown, with_header
from ..scoring import new_report

PROFILE = DialectProfile("droid", "Droid", unsupported=frozenset({"hook"}), header_only=frozenset({"tools"}))
HEADER_FIELDS = ("name", "description", "version", "argument-hint", "allowed-tools")


def from_droid(content: str, metadata: PackageMetadata, subtype: Optional[Subtype] = None) -> CanonicalPackage:
    header, body = extract(content, dialect="droid")
    data = header.data if header else {}
    parsed = parse_markdown_body(body)

    allowed_tools = as_list(data.get("allowed-tools"))
    sections = list(parsed.sections)
    if allowed_tools:
        sections.append(ToolsSection(allowed_tools))

    extension = DroidExtension(
        argument_hint=data.get("argument-hint"),
        allowed_tools=allowed_tools,
        extra=unknown_fields(data, HEADER_FIELDS),
    )
    default = Subtype.SLASH_COMMAND if extension.argument_hint else Subtype.SKILL

    return build_package(
        metadata,
        Format.DROID,
        sections,
        title=parsed.title,
        name=data.get("name"),
        description=data.get("description"),
        icon=parsed.icon,
        version=data.get("version"),
        subtype=coerce_subtype(subtype, default),
        extension=extension if extension != DroidExtension() else None,
    )


def _header_fields(pkg: CanonicalPackage) -> Dict[str, Any]:
    meta = pkg.metadata_section
    extension = (meta.extension(DroidExtension) if meta else None) or DroidExtension()
    tools = collect_tools(pkg) or extension.allowed_tools
    fields = {
        "name": (meta.title if meta and meta.title else None) or pkg.name,
        "description": pkg.description or (meta.description if meta else None) or None,
        "argument-hint": extension.argument_hint,
        "allowed-tools": list(tools) or None,
    }
    return with_extra(fields, extension.extra)


def to_droid(pkg: CanonicalPackage, options: Optional[ConversionOptions] = None) -> ConversionResult:
    report = new_report("droid", options)
    body = render_markdown(pkg, PROFILE, report, include_heading=False)
    content = with_header(render_yaml_header(_header_fields(pkg)), body)
    return report.finish(content, pkg.subtype)


@converter_registry.register
class DroidConverter(BaseConverter):
    format_info = FormatInfo(
        name="droid",
        display_name="Factory Droid",
        output_dir=".factory/skills",
        aliases=("factory", "factory-droid"),
    )

    def parse(self, content, metadata, **options):
        return from_droid(content, metadata, options.get("subtype"))

    def serialize(self, pkg, options=None):
        return to_droid(pkg, options)

    def output_path(self, pkg):
        if pkg.subtype is Subtype.SLASH_COMMAND:
            return f".factory/commands/{pkg.name}.md"
        return f"{self.format_info.output_dir}/{pkg.name}/SKILL.md"
