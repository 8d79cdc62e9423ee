"""
Converter base class and the process-wide registry.

Each dialect module defines one BaseConverter subclass and registers it with
``@converter_registry.register``. Importing ``prompt_bridge.converters``
populates the registry; after that it is only read.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..errors import UnknownFormatError
from ..models import CanonicalPackage, ConversionOptions, ConversionResult, PackageMetadata


@dataclass(frozen=True)
class FormatInfo:
    name: str
    display_name: str
    output_dir: str
    extension: str = ".md"
    status: str = "stable"
    aliases: Tuple[str, ...] = ()


class BaseConverter:
    format_info: FormatInfo

    def parse(self, content: str, metadata: PackageMetadata, **options) -> CanonicalPackage:
        raise NotImplementedError

    def serialize(self, pkg: CanonicalPackage, options: Optional[ConversionOptions] = None) -> ConversionResult:
        raise NotImplementedError

    def output_path(self, pkg: CanonicalPackage) -> str:
        """Conventional location of the file, relative to the project root."""
        return f"{self.format_info.output_dir}/{pkg.name}{self.format_info.extension}"

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.format_info.name}>"


class ConverterRegistry:
    def __init__(self):
        self._converters: Dict[str, BaseConverter] = {}
        self._aliases: Dict[str, str] = {}

    def register(self, cls):
        """Class decorator: instantiate and register a converter."""
        converter = cls()
        name = converter.format_info.name.lower()
        self._converters[name] = converter
        for alias in converter.format_info.aliases:
            self._aliases[alias.lower()] = name
        return cls

    def get(self, name: str) -> Optional[BaseConverter]:
        key = name.lower()
        return self._converters.get(self._aliases.get(key, key))

    def require(self, name: str) -> BaseConverter:
        converter = self.get(name)
        if converter is None:
            raise UnknownFormatError(name, self.names())
        return converter

    def names(self) -> List[str]:
        return list(self._converters)

    def all(self) -> List[BaseConverter]:
        return list(self._converters.values())


converter_registry = ConverterRegistry()
