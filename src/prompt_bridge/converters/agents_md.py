"""
AGENTS.md Converter
Converts between AGENTS.md project instructions and the canonical package.

Output structure:
- AGENTS.md (plain markdown at the project root, no frontmatter)

The H1 names the project; the paragraph under it is the description.

Reference: https://agents.md/
"""

from typing import Optional

from ..core.converter import BaseConverter, FormatInfo, converter_registry
from ..core.package import build_package, coerce_subtype
from ..frontmatter import extract
from ..markdown import parse_markdown_body
from ..models import (
    AgentsMdExtension,
    CanonicalPackage,
    ConversionOptions,
    ConversionResult,
    Format,
    PackageMetadata,
    Subtype,
)
from ..render import DialectProfile, render_markdown
from ..scoring import new_report

PROFILE = DialectProfile("agents.md", "AGENTS.md")

OUTPUT_FILE = "AGENTS.md"


def from_agents_md(content: str, metadata: PackageMetadata, subtype: Optional[Subtype] = None) -> CanonicalPackage:
    # AGENTS.md has no header, but a stray one must not end up in the body
    _, body = extract(content, dialect="agents.md")
    parsed = parse_markdown_body(body, description_from_preamble=True)
    return build_package(
        metadata,
        Format.AGENTS_MD,
        parsed.sections,
        title=parsed.title,
        description=parsed.description,
        icon=parsed.icon,
        subtype=coerce_subtype(subtype),
        extension=AgentsMdExtension(project=parsed.title) if parsed.title else None,
    )


def to_agents_md(pkg: CanonicalPackage, options: Optional[ConversionOptions] = None) -> ConversionResult:
    report = new_report("agents.md", options)
    content = render_markdown(pkg, PROFILE, report, description_in_body=True)
    return report.finish(content, pkg.subtype)


@converter_registry.register
class AgentsMdConverter(BaseConverter):
    format_info = FormatInfo(
        name="agents.md",
        display_name="AGENTS.md",
        output_dir=".",
        aliases=("agents-md", "agentsmd", "agents"),
    )

    def parse(self, content, metadata, **options):
        return from_agents_md(content, metadata, options.get("subtype"))

    def serialize(self, pkg, options=None):
        return to_agents_md(pkg, options)

    def output_path(self, pkg):
        return OUTPUT_FILE
