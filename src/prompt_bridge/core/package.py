"""Assembly of a CanonicalPackage from what a parser found."""

from typing import Iterable, Optional, Sequence

from ..models import (
    Author,
    CanonicalContent,
    CanonicalPackage,
    DialectExtension,
    Format,
    MetadataSection,
    PackageMetadata,
    Section,
    Subtype,
)

DEFAULT_VERSION = "1.0.0"


def build_package(
    metadata: PackageMetadata,
    fmt: Format,
    sections: Sequence[Section],
    title: Optional[str] = None,
    name: Optional[str] = None,
    description: Optional[str] = None,
    icon: Optional[str] = None,
    subtype: Subtype = Subtype.RULE,
    extension: Optional[DialectExtension] = None,
    tags: Iterable[str] = (),
    source_format: Optional[str] = None,
    version: Optional[str] = None,
    author=None,
) -> CanonicalPackage:
    """
    Synthesize the metadata section and wrap ``sections`` into a package.

    Values found in the document win over the caller's metadata, which in
    turn wins over defaults (the caller's ``id``).
    """
    name = name or metadata.name or metadata.id
    title = title or name
    description = description or metadata.description or ""
    version = str(version or metadata.version or DEFAULT_VERSION)
    author = Author.coerce(author or metadata.author)

    meta_section = MetadataSection(
        title=title,
        description=description,
        icon=icon,
        version=version,
        author=str(author) if author else None,
        extensions=(extension,) if extension is not None else (),
    )
    return CanonicalPackage(
        id=metadata.id,
        name=name,
        version=version,
        description=description,
        author=author,
        content=CanonicalContent((meta_section,) + tuple(sections)),
        format=fmt,
        subtype=subtype,
        tags=frozenset(metadata.tags) | frozenset(tags),
        source_format=source_format or fmt.value,
    )


def coerce_subtype(value, default: Subtype = Subtype.RULE) -> Subtype:
    """Accept a Subtype, its string value or None."""
    if value is None:
        return default
    if isinstance(value, Subtype):
        return value
    return Subtype(str(value))
