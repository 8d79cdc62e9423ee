from prompt_bridge.core.converter import BaseConverter, FormatInfo, converter_registry
from prompt_bridge.core.package import build_package

__all__ = ["BaseConverter", "FormatInfo", "converter_registry", "build_package"]
