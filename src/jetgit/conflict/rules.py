"""Automatic conflict resolution rules.

Rules run in a fixed order and the first one that returns a decision
wins. default_rules() builds the standard chain.

All rules are line and pattern heuristics. The three-way rule's
non-overlap check in particular is approximate: it compares sets of
lines, not positions, so it can accept two edits of the same logical
line that keep some identical lines, and reject disjoint edits that
change line counts a lot.
"""

from __future__ import annotations

import math
import re
from abc import abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from jetgit.conflict.models import ConflictRegion, Resolution

if TYPE_CHECKING:
    from jetgit.core.config import ResolverSettings

IMPORT_PATTERN = re.compile(
    r"""^(import\s"""
    r"""|const\s.*=\s*require\("""
    r"""|from\s['"]"""
    r"""|from\s+[\w.]+\s+import\s"""
    r"""|export\s.*from)"""
)
COMMENT_PATTERN = re.compile(r"^(//|/\*|\*|#|<!--)")


@dataclass(frozen=True)
class RuleDecision:
    """Resolution picked by a rule, with the user-facing reason."""

    resolution: Resolution
    reason: str


class Rule(Protocol):
    """One step of the auto-resolution chain."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Rule name, as used in ResolverSettings.disabled_rules."""
        pass

    @abstractmethod
    def apply(self, region: ConflictRegion) -> RuleDecision | None:
        """Return a decision, or None to let the next rule try."""
        pass


# ------------------------------------------------------------
# Helpers
# ------------------------------------------------------------

def normalize_whitespace(content: str, tab_width: int = 4) -> str:
    """Reduce content to a canonical form that ignores whitespace.

    CRLF becomes LF, tabs become spaces, trailing blanks are stripped
    per line, then every whitespace run collapses to one space.
    """
    content = content.replace("\r\n", "\n")
    content = content.replace("\t", " " * tab_width)
    content = re.sub(r"[ \t]+$", "", content, flags=re.MULTILINE)
    content = re.sub(r"\s+", " ", content)
    return content.strip()


def significant_lines(content: str) -> list[str]:
    """Stripped, non-blank lines of content."""
    return [line.strip() for line in content.split("\n") if line.strip()]


def count_common_lines(lines1: list[str], lines2: list[str]) -> int:
    """Number of distinct stripped lines present in both lists."""
    return len(
        {line.strip() for line in lines1} & {line.strip() for line in lines2}
    )


def has_non_overlapping_changes(
    base: str,
    current: str,
    incoming: str,
    max_line_delta: int = 5,
    common_line_ratio: float = 0.5,
) -> bool:
    """Guess whether both sides changed different parts of base.

    Both sides must stay within max_line_delta lines of the base's
    length and each must still share at least common_line_ratio of the
    base's lines (never fewer than one).
    """
    base_lines = base.split("\n")
    current_lines = current.split("\n")
    incoming_lines = incoming.split("\n")

    if (abs(len(current_lines) - len(base_lines)) > max_line_delta
            or abs(len(incoming_lines) - len(base_lines)) > max_line_delta):
        return False

    threshold = max(1, math.floor(len(base_lines) * common_line_ratio))
    return (
        count_common_lines(base_lines, current_lines) >= threshold
        and count_common_lines(base_lines, incoming_lines) >= threshold
    )


def is_import_line(line: str) -> bool:
    """True for import, require and re-export statements."""
    return bool(IMPORT_PATTERN.match(line))


def is_comment_line(line: str) -> bool:
    """True for line comments and block comment lines."""
    return bool(COMMENT_PATTERN.match(line)) or line == "*/"


# ------------------------------------------------------------
# Rules, in chain order
# ------------------------------------------------------------

class PureAdditionRule:
    """Only the incoming side has content."""

    @property
    def name(self) -> str:
        return "pure_addition"

    def apply(self, region: ConflictRegion) -> RuleDecision | None:
        if (not region.current_content.strip()
                and region.incoming_content.strip()):
            return RuleDecision(
                Resolution.INCOMING,
                "Pure addition - incoming side has content, "
                "current side is empty",
            )
        return None


class PureDeletionRule:
    """Only the current side has content."""

    @property
    def name(self) -> str:
        return "pure_deletion"

    def apply(self, region: ConflictRegion) -> RuleDecision | None:
        if (not region.incoming_content.strip()
                and region.current_content.strip()):
            return RuleDecision(
                Resolution.CURRENT,
                "Pure deletion - current side has content, "
                "incoming side is empty",
            )
        return None


class IdenticalContentRule:
    """Both sides hold the same text."""

    @property
    def name(self) -> str:
        return "identical"

    def apply(self, region: ConflictRegion) -> RuleDecision | None:
        if region.current_content.strip() == region.incoming_content.strip():
            return RuleDecision(
                Resolution.CURRENT, "Identical content on both sides"
            )
        return None


class WhitespaceRule:
    """Sides differ only in whitespace; current wins."""

    def __init__(self, tab_width: int = 4):
        self.tab_width = tab_width

    @property
    def name(self) -> str:
        return "whitespace"

    def apply(self, region: ConflictRegion) -> RuleDecision | None:
        current = normalize_whitespace(region.current_content, self.tab_width)
        incoming = normalize_whitespace(
            region.incoming_content, self.tab_width
        )
        if current == incoming:
            return RuleDecision(
                Resolution.CURRENT, "Whitespace-only differences detected"
            )
        return None


class ThreeWayRule:
    """Use the common ancestor to see which side actually changed.

    Skipped when the region has no (or empty) base content.
    """

    def __init__(
        self, max_line_delta: int = 5, common_line_ratio: float = 0.5
    ):
        self.max_line_delta = max_line_delta
        self.common_line_ratio = common_line_ratio

    @property
    def name(self) -> str:
        return "three_way"

    def apply(self, region: ConflictRegion) -> RuleDecision | None:
        if not region.base_content:
            return None

        base = region.base_content.strip()
        current = region.current_content.strip()
        incoming = region.incoming_content.strip()

        if current == base and incoming != base:
            return RuleDecision(
                Resolution.INCOMING,
                "Current side unchanged from base, incoming side has "
                "modifications",
            )
        if incoming == base and current != base:
            return RuleDecision(
                Resolution.CURRENT,
                "Incoming side unchanged from base, current side has "
                "modifications",
            )
        if current == incoming and current != base:
            return RuleDecision(
                Resolution.CURRENT,
                "Both sides made identical changes from base",
            )
        if has_non_overlapping_changes(
            base, current, incoming,
            self.max_line_delta, self.common_line_ratio,
        ):
            return RuleDecision(
                Resolution.BOTH,
                "Non-overlapping changes detected - both sides can be "
                "safely merged",
            )
        return None


class ImportRule:
    """Both sides are nothing but import statements."""

    @property
    def name(self) -> str:
        return "imports"

    def apply(self, region: ConflictRegion) -> RuleDecision | None:
        current = significant_lines(region.current_content)
        incoming = significant_lines(region.incoming_content)

        if not (all(map(is_import_line, current))
                and all(map(is_import_line, incoming))):
            return None

        if not set(current) & set(incoming):
            return RuleDecision(
                Resolution.BOTH,
                "Non-conflicting import statements - merging both sides",
            )
        if len(current) > len(incoming):
            return RuleDecision(
                Resolution.CURRENT,
                "Import conflict resolved - current side has more "
                "comprehensive imports",
            )
        if len(incoming) > len(current):
            return RuleDecision(
                Resolution.INCOMING,
                "Import conflict resolved - incoming side has more "
                "comprehensive imports",
            )
        return None


class CommentRule:
    """Both sides are nothing but comments; keep the fuller one."""

    def __init__(self, length_tolerance: float = 0.1):
        self.length_tolerance = length_tolerance

    @property
    def name(self) -> str:
        return "comments"

    def apply(self, region: ConflictRegion) -> RuleDecision | None:
        current = significant_lines(region.current_content)
        incoming = significant_lines(region.incoming_content)

        if not (all(map(is_comment_line, current))
                and all(map(is_comment_line, incoming))):
            return None

        current_length = len(region.current_content)
        incoming_length = len(region.incoming_content)
        longest = max(current_length, incoming_length)

        if (longest == 0 or abs(current_length - incoming_length) / longest
                < self.length_tolerance):
            return RuleDecision(
                Resolution.CURRENT,
                "Comment conflict resolved - similar content, preferring "
                "current version",
            )
        if current_length > incoming_length:
            return RuleDecision(
                Resolution.CURRENT,
                "Comment conflict resolved - current version is more "
                "detailed",
            )
        return RuleDecision(
            Resolution.INCOMING,
            "Comment conflict resolved - incoming version is more detailed",
        )


def default_rules(settings: ResolverSettings | None = None) -> list[Rule]:
    """Build the standard chain, minus any disabled rules."""
    if settings is None:
        from jetgit.core.config import ResolverSettings
        settings = ResolverSettings()

    rules: list[Rule] = [
        PureAdditionRule(),
        PureDeletionRule(),
        IdenticalContentRule(),
        WhitespaceRule(tab_width=settings.tab_width),
        ThreeWayRule(
            max_line_delta=settings.max_line_delta,
            common_line_ratio=settings.common_line_ratio,
        ),
        ImportRule(),
        CommentRule(length_tolerance=settings.comment_length_tolerance),
    ]
    disabled = set(settings.disabled_rules)
    return [rule for rule in rules if rule.name not in disabled]


def first_decision(
    region: ConflictRegion, rules: list[Rule]
) -> tuple[Rule, RuleDecision] | None:
    """Run rules in order; return the first that decides, or None."""
    for rule in rules:
        decision = rule.apply(region)
        if decision is not None:
            return rule, decision
    return None
