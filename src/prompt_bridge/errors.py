"""Exceptions raised by parsers and the registry."""

from typing import Optional


class ParseError(Exception):
    """A document could not be turned into a canonical package."""

    def __init__(self, message: str, dialect: Optional[str] = None):
        self.dialect = dialect
        prefix = f"[{dialect}] " if dialect else ""
        super().__init__(f"{prefix}{message}")


class MalformedFrontmatter(ParseError):
    """The header block exists but is not valid YAML/TOML, or is not a mapping."""


class MissingRequiredField(ParseError):
    def __init__(self, field: str, dialect: Optional[str] = None, detail: str = ""):
        self.field = field
        message = f"Missing required field '{field}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, dialect)


class UnknownFormatError(ValueError):
    def __init__(self, name: str, known=()):
        self.name = name
        hint = f" (known: {', '.join(known)})" if known else ""
        super().__init__(f"Unknown format: {name}{hint}")
