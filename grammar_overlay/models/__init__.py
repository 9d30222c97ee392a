"""Public model exports for the project.

Tests and other modules should import
``from grammar_overlay.models import Annotation, RawIssue, StyleRole``.
"""

from __future__ import annotations

from .annotation import Annotation, RawIssue
from .enums import ColorMode, OutputFormat, StyleRole

__all__ = ["Annotation", "RawIssue", "StyleRole", "OutputFormat", "ColorMode"]
