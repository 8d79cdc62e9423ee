"""
Business logic for 'prompt-bridge convert'.
Runs independent file conversions and returns structured data for display.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from prompt_bridge.core.converter import converter_registry
from prompt_bridge.errors import ParseError
from prompt_bridge.models import CanonicalPackage, ConversionOptions, ConversionResult, PackageMetadata
from prompt_bridge.utils import safe_read_text

logger = logging.getLogger(__name__)

# Longest first, so "x.instructions.md" loses the whole suffix
KNOWN_SUFFIXES = (".instructions.md", ".prompt.md", ".md", ".mdc", ".toml", ".json")
ENTRY_FILENAMES = ("SKILL", "AGENTS", "CLAUDE", "GEMINI")


@dataclass
class ConversionJob:
    source: Path
    source_format: str
    target_format: str
    author: Optional[str] = None


@dataclass
class JobOutcome:
    job: ConversionJob
    package: Optional[CanonicalPackage] = None
    result: Optional[ConversionResult] = None
    output_path: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchReport:
    outcomes: List[JobOutcome] = field(default_factory=list)
    stopped: bool = False

    @property
    def succeeded(self) -> List[JobOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> List[JobOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def average_score(self) -> Optional[float]:
        scores = [o.result.quality_score for o in self.succeeded]
        return sum(scores) / len(scores) if scores else None


def package_id_for(path: Path) -> str:
    """
    Derive a package id from a file name.

    ``.github/instructions/api.instructions.md`` -> ``api``;
    ``.claude/skills/review/SKILL.md`` -> ``review``.
    """
    name = path.name
    for suffix in KNOWN_SUFFIXES:
        if name.lower().endswith(suffix):
            name = name[: -len(suffix)]
            break
    if name.upper() in ENTRY_FILENAMES and path.parent.name:
        return path.parent.name
    return name


def convert_one(job: ConversionJob, options: Optional[ConversionOptions] = None) -> JobOutcome:
    """Parse one file and serialize it to the target dialect. Failures are captured, not raised."""
    content = safe_read_text(job.source)
    if content is None:
        return JobOutcome(job, error=f"Could not read {job.source}")

    source = converter_registry.require(job.source_format)
    target = converter_registry.require(job.target_format)
    metadata = PackageMetadata(id=package_id_for(job.source), author=job.author)
    try:
        pkg = source.parse(content, metadata)
    except ParseError as e:
        logger.warning("Failed to parse %s: %s", job.source, e)
        return JobOutcome(job, error=str(e))

    result = target.serialize(pkg, options)
    logger.debug("%s -> %s: score %d", job.source, target.format_info.name, result.quality_score)
    return JobOutcome(job, package=pkg, result=result, output_path=target.output_path(pkg))


def convert_batch(
    jobs: Sequence[ConversionJob],
    options: Optional[ConversionOptions] = None,
    max_workers: int = 4,
    stop_on_error: bool = False,
) -> BatchReport:
    """
    Convert ``jobs`` on a thread pool. Outcomes keep the order of ``jobs``.

    With ``stop_on_error`` no new job starts after the first failure; jobs
    already running finish and are reported.
    """
    for job in jobs:
        converter_registry.require(job.source_format)
        converter_registry.require(job.target_format)

    stop = threading.Event()

    def run(job: ConversionJob) -> Optional[JobOutcome]:
        if stop.is_set():
            return None
        outcome = convert_one(job, options)
        if not outcome.ok and stop_on_error:
            stop.set()
        return outcome

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as pool:
        outcomes = list(pool.map(run, jobs))

    report = BatchReport(outcomes=[o for o in outcomes if o is not None])
    report.stopped = len(report.outcomes) < len(jobs)
    return report
