"""Result types for workflow runs."""

from pydantic import BaseModel, Field


class ResolveSummary(BaseModel):
    """Outcome of the resolve workflow over a repository."""

    resolved_files: list[str] = Field(default_factory=list)
    pending_files: list[str] = Field(default_factory=list)
    failed_files: dict[str, str] = Field(default_factory=dict)
    auto_resolved: int = 0
    unresolved: int = 0

    @property
    def success(self) -> bool:
        """True when nothing is left for the user to resolve."""
        return not self.pending_files and not self.failed_files
