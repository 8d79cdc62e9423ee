"""
Gemini CLI Converter
Converts between Gemini custom commands (TOML) and the canonical package.

Output structure:
- .gemini/commands/*.toml

TOML keys:
    description = "..."
    prompt = '''...'''

Reference: https://github.com/google-gemini/gemini-cli/blob/main/docs/cli/custom-commands.md
"""

from typing import Optional

import tomli_w

from ..core.converter import BaseConverter, FormatInfo, converter_registry
from ..core.package import build_package, coerce_subtype
from ..errors import MissingRequiredField
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
from ..render import DialectProfile, plain_text
from ..scoring import new_report

PROFILE = DialectProfile("gemini", "Gemini")


def from_gemini(content: str, metadata: PackageMetadata, subtype: Optional[Subtype] = None) -> CanonicalPackage:
    header, _ = extract(content, toml=True, dialect="gemini")
    prompt = header.get("prompt")
    if not isinstance(prompt, str) or not prompt.strip():
        raise MissingRequiredField("prompt", "gemini", "custom commands need a non-empty prompt")

    parsed = parse_markdown_body(prompt)
    return build_package(
        metadata,
        Format.GEMINI,
        parsed.sections,
        title=parsed.title,
        description=header.get("description"),
        icon=parsed.icon,
        subtype=coerce_subtype(subtype, Subtype.SLASH_COMMAND),
    )


def to_gemini(pkg: CanonicalPackage, options: Optional[ConversionOptions] = None) -> ConversionResult:
    report = new_report("gemini", options)
    command = {}
    if pkg.description:
        command["description"] = pkg.description
    command["prompt"] = plain_text(pkg, PROFILE, report)
    content = tomli_w.dumps(command, multiline_strings=True)
    return report.finish(content, pkg.subtype)


@converter_registry.register
class GeminiConverter(BaseConverter):
    format_info = FormatInfo(
        name="gemini",
        display_name="Gemini CLI",
        output_dir=".gemini/commands",
        extension=".toml",
        aliases=("gemini-cli",),
    )

    def parse(self, content, metadata, **options):
        return from_gemini(content, metadata, options.get("subtype"))

    def serialize(self, pkg, options=None):
        return to_gemini(pkg, options)
