"""
Zencoder Converter
Converts between Zencoder rules and the canonical package.

Output structure:
- .zencoder/rules/*.md (markdown, optional frontmatter)

Frontmatter: description, globs (list), alwaysApply. It is written only when
the rule is scoped (globs) or pinned (alwaysApply); otherwise the
description goes in the body under the H1.

Reference: https://docs.zencoder.ai/rules-context/zen-rules
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
    Format,
    PackageMetadata,
    Subtype,
    ZencoderExtension,
)
from ..render import DialectProfile, render_markdown, with_header
from ..scoring import new_report

PROFILE = DialectProfile("zencoder", "Zencoder", unsupported=frozenset({"persona", "tools", "hook"}))

HEADER_FIELDS = ("description", "globs", "alwaysApply")


def from_zencoder(content: str, metadata: PackageMetadata, subtype: Optional[Subtype] = None) -> CanonicalPackage:
    header, body = extract(content, dialect="zencoder")
    data = header.data if header else {}
    description = data.get("description")
    parsed = parse_markdown_body(body, description_from_preamble=not description)

    always_apply = data.get("alwaysApply")
    extension = ZencoderExtension(
        globs=as_list(data.get("globs")),
        always_apply=always_apply if isinstance(always_apply, bool) else None,
        extra=unknown_fields(data, HEADER_FIELDS),
    )
    return build_package(
        metadata,
        Format.ZENCODER,
        parsed.sections,
        title=parsed.title,
        description=description or parsed.description,
        icon=parsed.icon,
        subtype=coerce_subtype(subtype),
        extension=extension if extension != ZencoderExtension() else None,
    )


def generate_frontmatter(pkg: CanonicalPackage, options: Optional[ConversionOptions]) -> Dict[str, Any]:
    """Header fields for a scoped or pinned rule; empty when the rule is neither."""
    meta = pkg.metadata_section
    extension = (meta.extension(ZencoderExtension) if meta else None) or ZencoderExtension()
    globs = list(options.cursor_globs) if options and options.cursor_globs else list(extension.globs)
    always_apply = options.always_apply if options and options.always_apply is not None else extension.always_apply
    if not globs and always_apply is None:
        return {}
    fields = {
        "description": pkg.description or None,
        "globs": globs or None,
        "alwaysApply": always_apply,
    }
    return with_extra(fields, extension.extra)


def to_zencoder(pkg: CanonicalPackage, options: Optional[ConversionOptions] = None) -> ConversionResult:
    report = new_report("zencoder", options)
    fields = generate_frontmatter(pkg, options)
    body = render_markdown(pkg, PROFILE, report, description_in_body=not fields)
    return report.finish(with_header(render_yaml_header(fields), body), pkg.subtype)


@converter_registry.register
class ZencoderConverter(BaseConverter):
    format_info = FormatInfo(
        name="zencoder",
        display_name="Zencoder",
        output_dir=".zencoder/rules",
        status="beta",
    )

    def parse(self, content, metadata, **options):
        return from_zencoder(content, metadata, options.get("subtype"))

    def serialize(self, pkg, options=None):
        return to_zencoder(pkg, options)
