"""Rule-based detection and resolution of git merge conflicts."""

__version__ = "0.1.0"
