"""
GitHub Copilot Converter
Converts between Copilot custom instructions and the canonical package.

Output structure:
- .github/copilot-instructions.md (repository-wide, no frontmatter)
- .github/instructions/*.instructions.md (path-specific, applyTo frontmatter)

Reference: https://docs.github.com/en/copilot/customizing-copilot/adding-repository-custom-instructions-for-github-copilot
"""

from typing import Optional

from ..core.converter import BaseConverter, FormatInfo, converter_registry
from ..core.package import build_package, coerce_subtype
from ..frontmatter import extract, render_yaml_header, unknown_fields, with_extra
from ..markdown import parse_markdown_body
from ..models import (
    CanonicalPackage,
    ConversionOptions,
    ConversionResult,
    CopilotExtension,
    Format,
    PackageMetadata,
    Subtype,
)
from ..render import DialectProfile, render_markdown, with_header
from ..scoring import new_report

PROFILE = DialectProfile("copilot", "Copilot", unsupported=frozenset({"persona", "tools", "hook"}))

REPOSITORY_INSTRUCTIONS = ".github/copilot-instructions.md"
HEADER_FIELDS = ("applyTo", "excludeAgent")


def from_copilot(content: str, metadata: PackageMetadata, subtype: Optional[Subtype] = None) -> CanonicalPackage:
    header, body = extract(content, dialect="copilot")
    data = header.data if header else {}
    parsed = parse_markdown_body(body, description_from_preamble=True)

    extension = CopilotExtension(
        apply_to=data.get("applyTo"),
        exclude_agent=data.get("excludeAgent"),
        extra=unknown_fields(data, HEADER_FIELDS),
    )
    return build_package(
        metadata,
        Format.COPILOT,
        parsed.sections,
        title=parsed.title,
        description=parsed.description,
        icon=parsed.icon,
        subtype=coerce_subtype(subtype),
        extension=extension if extension != CopilotExtension() else None,
    )


def to_copilot(pkg: CanonicalPackage, options: Optional[ConversionOptions] = None) -> ConversionResult:
    report = new_report("copilot", options)
    meta = pkg.metadata_section
    extension = (meta.extension(CopilotExtension) if meta else None) or CopilotExtension()
    apply_to = (options.copilot_apply_to if options else None) or extension.apply_to

    body = render_markdown(pkg, PROFILE, report, description_in_body=True)
    header = ""
    if apply_to:
        fields = {"applyTo": apply_to, "excludeAgent": extension.exclude_agent}
        header = render_yaml_header(with_extra(fields, extension.extra))
    return report.finish(with_header(header, body), pkg.subtype)


@converter_registry.register
class CopilotConverter(BaseConverter):
    format_info = FormatInfo(
        name="copilot",
        display_name="GitHub Copilot",
        output_dir=".github/instructions",
        aliases=("github-copilot",),
    )

    def parse(self, content, metadata, **options):
        return from_copilot(content, metadata, options.get("subtype"))

    def serialize(self, pkg, options=None):
        return to_copilot(pkg, options)

    def output_path(self, pkg):
        meta = pkg.metadata_section
        extension = meta.extension(CopilotExtension) if meta else None
        if extension and extension.apply_to:
            return f"{self.format_info.output_dir}/{pkg.name}.instructions.md"
        return REPOSITORY_INSTRUCTIONS
