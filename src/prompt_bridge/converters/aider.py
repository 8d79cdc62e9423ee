"""
Aider Converter
Converts between Aider conventions files and the canonical package.

Output structure:
- CONVENTIONS.md (plain markdown at the project root, no frontmatter)

Aider reads the file via ``--read CONVENTIONS.md`` or the ``read:`` list in
``.aider.conf.yml``. The paragraph under the H1 is the description.

Reference: https://aider.chat/docs/usage/conventions.html
"""

from typing import List, Optional

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

PROFILE = DialectProfile("aider", "Aider", unsupported=frozenset({"persona", "tools", "hook"}))

OUTPUT_FILE = "CONVENTIONS.md"
TECH_KEYWORDS = (
    "typescript",
    "javascript",
    "python",
    "react",
    "testing",
    "api",
    "backend",
    "frontend",
    "database",
    "security",
)
MAX_INFERRED_TAGS = 5


def infer_tags(content: str) -> List[str]:
    """Technology tags named in the text, at most five."""
    lowered = content.lower()
    return [word for word in TECH_KEYWORDS if word in lowered][:MAX_INFERRED_TAGS]


def from_aider(content: str, metadata: PackageMetadata, subtype: Optional[Subtype] = None) -> CanonicalPackage:
    _, body = extract(content, dialect="aider")
    parsed = parse_markdown_body(body, description_from_preamble=True)
    return build_package(
        metadata,
        Format.AIDER,
        parsed.sections,
        title=parsed.title,
        description=parsed.description,
        icon=parsed.icon,
        subtype=coerce_subtype(subtype),
        tags=["aider", *infer_tags(body)],
    )


def to_aider(pkg: CanonicalPackage, options: Optional[ConversionOptions] = None) -> ConversionResult:
    report = new_report("aider", options)
    content = render_markdown(pkg, PROFILE, report, description_in_body=True)
    return report.finish(content, pkg.subtype)


@converter_registry.register
class AiderConverter(BaseConverter):
    format_info = FormatInfo(
        name="aider",
        display_name="Aider",
        output_dir=".",
        aliases=("aider-chat",),
    )

    def parse(self, content, metadata, **options):
        return from_aider(content, metadata, options.get("subtype"))

    def serialize(self, pkg, options=None):
        return to_aider(pkg, options)

    def output_path(self, pkg):
        return OUTPUT_FILE
