"""Resolve workflow over a repository's conflicted files."""
