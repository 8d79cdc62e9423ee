"""
Cursor AI Converter
Converts between Cursor MDC rules and the canonical package.

Output structure:
- .cursor/rules/*.mdc (rules with MDC frontmatter)
- .cursor/commands/*.md (slash commands, plain markdown)

Reference: https://cursor.com/docs/context/rules
MDC Format: description, globs, alwaysApply frontmatter
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
    CursorExtension,
    Format,
    PackageMetadata,
    Subtype,
)
from ..render import DialectProfile, render_markdown, with_header
from ..scoring import new_report

PROFILE = DialectProfile("cursor", "Cursor")
HEADER_FIELDS = ("description", "globs", "alwaysApply", "version")


def generate_mdc_frontmatter(
    description: str = "", globs: str = "", always_apply: bool = False, extra: Optional[Dict[str, Any]] = None
) -> str:
    """
    Generate MDC frontmatter for Cursor rules.
    """
    fields: Dict[str, Any] = {"description": description}
    if globs:
        fields["globs"] = globs
    fields["alwaysApply"] = always_apply
    return render_yaml_header(with_extra(fields, extra))


def from_cursor(content: str, metadata: PackageMetadata, subtype: Optional[Subtype] = None) -> CanonicalPackage:
    header, body = extract(content, dialect="cursor")
    data = header.data if header else {}
    parsed = parse_markdown_body(body)

    always_apply = data.get("alwaysApply")
    extension = CursorExtension(
        globs=as_list(data.get("globs")),
        always_apply=always_apply if isinstance(always_apply, bool) else None,
        extra=unknown_fields(data, HEADER_FIELDS),
    )
    return build_package(
        metadata,
        Format.CURSOR,
        parsed.sections,
        title=parsed.title,
        description=data.get("description"),
        icon=parsed.icon,
        version=data.get("version"),
        subtype=coerce_subtype(subtype),
        extension=extension if extension != CursorExtension() else None,
    )


def to_cursor(pkg: CanonicalPackage, options: Optional[ConversionOptions] = None) -> ConversionResult:
    report = new_report("cursor", options)
    body = render_markdown(pkg, PROFILE, report)

    # Cursor commands are plain markdown files
    if pkg.subtype is Subtype.SLASH_COMMAND:
        return report.finish(body, pkg.subtype)

    meta = pkg.metadata_section
    extension = (meta.extension(CursorExtension) if meta else None) or CursorExtension()
    globs = tuple(options.cursor_globs) if options and options.cursor_globs else extension.globs
    always_apply = options.always_apply if options and options.always_apply is not None else extension.always_apply
    if always_apply is None:
        always_apply = not globs

    header = generate_mdc_frontmatter(
        description=pkg.description or pkg.title,
        globs=",".join(globs),
        always_apply=always_apply,
        extra=extension.extra,
    )
    return report.finish(with_header(header, body), pkg.subtype)


@converter_registry.register
class CursorConverter(BaseConverter):
    format_info = FormatInfo(
        name="cursor",
        display_name="Cursor AI",
        output_dir=".cursor/rules",
        extension=".mdc",
    )

    def parse(self, content, metadata, **options):
        return from_cursor(content, metadata, options.get("subtype"))

    def serialize(self, pkg, options=None):
        return to_cursor(pkg, options)

    def output_path(self, pkg):
        if pkg.subtype is Subtype.SLASH_COMMAND:
            return f".cursor/commands/{pkg.name}.md"
        return super().output_path(pkg)
