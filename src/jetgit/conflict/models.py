"""Data models for conflict detection and resolution.

Regions are immutable; every change produces a new region through
model_copy(update=...), so a resolution pass never alters its input.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Resolution(str, Enum):
    """How a conflict region is turned back into plain text."""

    CURRENT = "current"    # keep our side
    INCOMING = "incoming"  # take their side
    BOTH = "both"          # ours followed by theirs
    MANUAL = "manual"      # text supplied by the user


class ConflictRegion(BaseModel):
    """One <<<<<<< / ======= / >>>>>>> block found in a file.

    Attributes:
        start_line: 0-based index of the opening marker line
        end_line: 0-based index of the closing marker line
        current_content: Lines between opening marker and separator
        incoming_content: Lines between separator and closing marker
        base_content: Common ancestor text, when known
        is_resolved: Whether a resolution has been chosen
        resolution: The chosen resolution
        auto_resolved: True when a rule, not a person, chose it
        auto_resolve_reason: Which rule fired and why
        manual_content: Text to emit for a manual resolution
        current_label: Ref named on the opening marker (e.g. HEAD)
        incoming_label: Ref named on the closing marker
    """

    model_config = ConfigDict(frozen=True)

    start_line: int = Field(ge=0)
    end_line: int = Field(ge=0)
    current_content: str
    incoming_content: str
    base_content: str | None = None
    is_resolved: bool = False
    resolution: Resolution | None = None
    auto_resolved: bool | None = None
    auto_resolve_reason: str | None = None
    manual_content: str | None = None
    current_label: str = ""
    incoming_label: str = ""

    @model_validator(mode='after')
    def _check_span(self) -> ConflictRegion:
        if self.start_line >= self.end_line:
            raise ValueError(
                f"start_line ({self.start_line}) must be before "
                f"end_line ({self.end_line})"
            )
        return self

    @property
    def line_count(self) -> int:
        """Number of original lines the region spans, markers included."""
        return self.end_line - self.start_line + 1


class ConflictStats(BaseModel):
    """Counts for reporting resolution progress."""

    total: int = 0
    resolved: int = 0
    auto_resolved: int = 0
    manually_resolved: int = 0
    unresolved: int = 0


class MergeCompletion(BaseModel):
    """Whether a merge may be completed, and why (not)."""

    can_complete: bool
    reason: str


class ResolutionState(BaseModel):
    """Summary shown to the user after a resolution pass."""

    can_complete_automatically: bool
    requires_manual_intervention: bool
    auto_resolved_conflicts: list[ConflictRegion] = Field(default_factory=list)
    manual_conflicts: list[ConflictRegion] = Field(default_factory=list)
    resolution_summary: str = ""
    next_action: str = ""


class FeedbackDetail(BaseModel):
    """Per-region explanation of an automatic resolution."""

    conflict: ConflictRegion
    feedback: str


class AutoResolutionFeedback(BaseModel):
    """What the rule chain did, in user-facing form."""

    message: str
    details: list[FeedbackDetail] = Field(default_factory=list)
