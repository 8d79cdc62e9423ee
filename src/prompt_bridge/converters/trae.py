"""
Trae Converter
Converts between Trae project rules and the canonical package.

Output structure:
- .trae/rules/*.md (plain markdown, no frontmatter)

Reference: https://docs.trae.ai/ide/rules-for-ai
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
)
from ..render import DialectProfile, render_markdown
from ..scoring import new_report

PROFILE = DialectProfile("trae", "Trae", unsupported=frozenset({"persona", "tools", "hook"}))


def from_trae(content: str, metadata: PackageMetadata, subtype: Optional[Subtype] = None) -> CanonicalPackage:
    _, body = extract(content, dialect="trae")
    parsed = parse_markdown_body(body, description_from_preamble=True)
    return build_package(
        metadata,
        Format.TRAE,
        parsed.sections,
        title=parsed.title,
        description=parsed.description,
        icon=parsed.icon,
        subtype=coerce_subtype(subtype),
    )


def to_trae(pkg: CanonicalPackage, options: Optional[ConversionOptions] = None) -> ConversionResult:
    report = new_report("trae", options)
    content = render_markdown(pkg, PROFILE, report, description_in_body=True)
    return report.finish(content, pkg.subtype)


@converter_registry.register
class TraeConverter(BaseConverter):
    format_info = FormatInfo(
        name="trae",
        display_name="Trae IDE",
        output_dir=".trae/rules",
        status="beta",
    )

    def parse(self, content, metadata, **options):
        return from_trae(content, metadata, options.get("subtype"))

    def serialize(self, pkg, options=None):
        return to_trae(pkg, options)
