"""Conflict marker parsing, auto-resolution rules and reassembly."""

from jetgit.conflict.models import (
    AutoResolutionFeedback,
    ConflictRegion,
    ConflictStats,
    MergeCompletion,
    Resolution,
    ResolutionState,
)
from jetgit.conflict.parser import parse_conflict_markers
from jetgit.conflict.resolver import ConflictResolver
from jetgit.conflict.rules import Rule, RuleDecision, default_rules

__all__ = [
    "AutoResolutionFeedback",
    "ConflictRegion",
    "ConflictResolver",
    "ConflictStats",
    "MergeCompletion",
    "Resolution",
    "ResolutionState",
    "Rule",
    "RuleDecision",
    "default_rules",
    "parse_conflict_markers",
]
