"""
Windsurf IDE Converter
Converts between Windsurf rules and the canonical package.

Output structure:
- .windsurf/rules/*.md (plain markdown, no frontmatter)

Windsurf rule files are capped at 12,000 characters. Anything longer is
still written but reported by the validator.

Reference: https://docs.windsurf.com/windsurf/cascade/memories
"""

from typing import Optional

from ..core.converter import BaseConverter, FormatInfo, converter_registry
from ..core.package import build_package, coerce_subtype
from ..frontmatter import extract
from ..markdown import parse_markdown_body
from ..models import (
    CanonicalPackage,
    ConversionOptions,
    ConversionResult,
    Format,
    PackageMetadata,
    Subtype,
    WindsurfExtension,
)
from ..render import DialectProfile, render_markdown
from ..scoring import new_report

PROFILE = DialectProfile("windsurf", "Windsurf")


def from_windsurf(content: str, metadata: PackageMetadata, subtype: Optional[Subtype] = None) -> CanonicalPackage:
    # Windsurf has no header, but tolerate one left behind by other tools.
    _, body = extract(content, dialect="windsurf")
    parsed = parse_markdown_body(body, description_from_preamble=True)
    return build_package(
        metadata,
        Format.WINDSURF,
        parsed.sections,
        title=parsed.title,
        description=parsed.description,
        icon=parsed.icon,
        subtype=coerce_subtype(subtype),
        extension=WindsurfExtension(character_count=len(content)),
    )


def to_windsurf(pkg: CanonicalPackage, options: Optional[ConversionOptions] = None) -> ConversionResult:
    report = new_report("windsurf", options)
    content = render_markdown(pkg, PROFILE, report, description_in_body=True)
    return report.finish(content, pkg.subtype)


@converter_registry.register
class WindsurfConverter(BaseConverter):
    format_info = FormatInfo(
        name="windsurf",
        display_name="Windsurf IDE",
        output_dir=".windsurf/rules",
    )

    def parse(self, content, metadata, **options):
        return from_windsurf(content, metadata, options.get("subtype"))

    def serialize(self, pkg, options=None):
        return to_windsurf(pkg, options)
