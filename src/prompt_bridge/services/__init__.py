"""
Services - business logic kept out of the CLI.
"""

from prompt_bridge.services.batch_service import (
    BatchReport,
    ConversionJob,
    JobOutcome,
    convert_batch,
    convert_one,
    package_id_for,
)
from prompt_bridge.services.batch_display import display_batch

__all__ = [
    "BatchReport",
    "ConversionJob",
    "JobOutcome",
    "convert_batch",
    "convert_one",
    "display_batch",
    "package_id_for",
]
