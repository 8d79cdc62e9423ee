"""
Quality scoring for serializer output.

Scores start at 100 and only ever go down: once if any warning marks the
conversion as lossy, then per subtype incompatibility, per partially
supported subtype and per validation error. The floor is 0.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .models import ConversionResult, Subtype
from .validation import ValidationResult, validate_output

LOSSY_MARKERS = ("not support", "skipped", "ignored")


@dataclass(frozen=True)
class ScoringPenalties:
    lossy_warning: int = 10
    subtype_incompatible: int = 20
    partial_subtype: int = 10
    validation_error: int = 5


DEFAULT_PENALTIES = ScoringPenalties()


def is_lossy(warnings: Iterable[str]) -> bool:
    return any(marker in warning for warning in warnings for marker in LOSSY_MARKERS)


def quality_score(
    warnings: Iterable[str],
    validation_errors: Iterable[str] = (),
    incompatible: int = 0,
    partial: int = 0,
    penalties: ScoringPenalties = DEFAULT_PENALTIES,
) -> int:
    score = 100
    if is_lossy(warnings):
        score -= penalties.lossy_warning
    score -= incompatible * penalties.subtype_incompatible
    score -= partial * penalties.partial_subtype
    score -= len(list(validation_errors)) * penalties.validation_error
    return max(0, score)


@dataclass
class ConversionReport:
    """Collects what a single serializer call had to give up."""

    dialect: str
    penalties: ScoringPenalties = DEFAULT_PENALTIES
    warnings: List[str] = field(default_factory=list)
    incompatible: int = 0
    partial: int = 0

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def incompatible_subtype(self, message: str) -> None:
        self.warnings.append(message)
        self.incompatible += 1

    def partial_subtype(self, message: str) -> None:
        self.warnings.append(message)
        self.partial += 1

    def finish(self, content: str, subtype: Optional[Subtype] = None, validation: Optional[ValidationResult] = None) -> ConversionResult:
        """Validate ``content`` and freeze everything into a ConversionResult."""
        if validation is None:
            validation = validate_output(self.dialect, content, subtype)
        warnings = self.warnings + [w for w in validation.warnings if w not in self.warnings]
        return ConversionResult(
            content=content,
            format=self.dialect,
            warnings=tuple(warnings),
            validation_errors=validation.errors,
            lossy_conversion=is_lossy(warnings),
            quality_score=quality_score(
                warnings, validation.errors, self.incompatible, self.partial, self.penalties
            ),
        )


def new_report(dialect: str, options=None) -> ConversionReport:
    penalties = getattr(options, "penalties", None) or DEFAULT_PENALTIES
    return ConversionReport(dialect, penalties)
