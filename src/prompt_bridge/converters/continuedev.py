"""
Continue Converter
Converts between Continue rules/prompts and the canonical package.

Output structure:
- .continue/rules/*.md (rules: name, description, globs, regex, alwaysApply)
- .continue/prompts/*.md (prompts: name, description, invokable: true)

Reference: https://docs.continue.dev/customize/deep-dives/rules
"""

from typing import Any, Dict, Optional

from ..core.package import build_package, coerce_subtype
from ..core.converter import BaseConverter, FormatInfo, converter_registry
from ..frontmatter import as_list, extract, render_yaml_header, unknown_fields, with_extra
from ..markdown import parse_markdown_body
from ..models import (
    CanonicalPackage,
    ContinueExtension,
    ConversionOptions,
    ConversionResult,
    Format,
    PackageMetadata,
    Subtype,
)
from ..render import DialectProfile, render_markdown, with_header
from ..scoring import new_report

PROFILE = DialectProfile("continue", "Continue", unsupported=frozenset({"persona", "tools", "hook"}))

PROMPT_SUBTYPES = (Subtype.PROMPT, Subtype.SLASH_COMMAND)
HEADER_FIELDS = ("name", "description", "version", "globs", "regex", "alwaysApply", "invokable")


def from_continue(content: str, metadata: PackageMetadata, subtype: Optional[Subtype] = None) -> CanonicalPackage:
    header, body = extract(content, dialect="continue")
    data = header.data if header else {}
    parsed = parse_markdown_body(body)

    extension = ContinueExtension(
        globs=as_list(data.get("globs")),
        regex=data.get("regex"),
        always_apply=data.get("alwaysApply") if isinstance(data.get("alwaysApply"), bool) else None,
        invokable=data.get("invokable") if isinstance(data.get("invokable"), bool) else None,
        extra=unknown_fields(data, HEADER_FIELDS),
    )
    default = Subtype.PROMPT if extension.invokable else Subtype.RULE

    return build_package(
        metadata,
        Format.CONTINUE,
        parsed.sections,
        title=parsed.title,
        name=data.get("name"),
        description=data.get("description"),
        icon=parsed.icon,
        version=data.get("version"),
        subtype=coerce_subtype(subtype, default),
        extension=extension if extension != ContinueExtension() else None,
    )


def _header_fields(pkg: CanonicalPackage, options: Optional[ConversionOptions]) -> Dict[str, Any]:
    meta = pkg.metadata_section
    extension = (meta.extension(ContinueExtension) if meta else None) or ContinueExtension()
    description = pkg.description or None

    if pkg.subtype in PROMPT_SUBTYPES:
        return with_extra({"name": pkg.name, "description": description, "invokable": True}, extension.extra)

    globs = list(options.cursor_globs) if options and options.cursor_globs else list(extension.globs)
    always_apply = options.always_apply if options and options.always_apply is not None else extension.always_apply
    fields = {
        "name": pkg.name,
        "description": description,
        "globs": globs or None,
        "regex": extension.regex,
        "alwaysApply": always_apply,
    }
    return with_extra(fields, extension.extra)


def to_continue(pkg: CanonicalPackage, options: Optional[ConversionOptions] = None) -> ConversionResult:
    report = new_report("continue", options)
    body = render_markdown(pkg, PROFILE, report)
    content = with_header(render_yaml_header(_header_fields(pkg, options)), body)
    return report.finish(content, pkg.subtype)


@converter_registry.register
class ContinueConverter(BaseConverter):
    format_info = FormatInfo(
        name="continue",
        display_name="Continue",
        output_dir=".continue/rules",
        aliases=("continue.dev", "continuedev"),
    )

    def parse(self, content, metadata, **options):
        return from_continue(content, metadata, options.get("subtype"))

    def serialize(self, pkg, options=None):
        return to_continue(pkg, options)

    def output_path(self, pkg):
        if pkg.subtype in PROMPT_SUBTYPES:
            return f".continue/prompts/{pkg.name}.md"
        return super().output_path(pkg)
