"""Issue models for the overlay engine.

``RawIssue`` mirrors one match reported by LanguageTool before any
validation or truncation has happened. ``Annotation`` is the normalised
record the resolver and renderer work with.

LanguageTool matches reach us in two shapes:
1. JSON objects from the HTTP ``/v2/check`` endpoint
   (``offset``, ``length``, ``replacements[].value``, ``rule.id``)
2. ``language_tool_python`` ``Match`` objects
   (``offset``, ``errorLength``, ``replacements``, ``ruleId``)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class RawIssue(BaseModel):
    """One unprocessed issue record from the analysis provider.

    ``offset`` and ``length`` count Unicode scalar values from the start of
    the checked text. Both must be real (non-boolean) integers; LanguageTool
    never sends them as strings, so anything else is treated as malformed.
    """

    model_config = ConfigDict(extra="ignore")

    message: str
    offset: int = Field(ge=0, strict=True)
    length: int = Field(ge=0, strict=True)
    candidates: List[str] = Field(default_factory=list)
    rule_id: str | None = None
    issue_type: str | None = None

    @field_validator("candidates", mode="before")
    def _keep_string_candidates(cls, value: object) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if not isinstance(value, (list, tuple)):
            raise ValueError("candidates must be a list")
        return [item for item in value if isinstance(item, str)]

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "RawIssue":
        """Build a RawIssue from a LanguageTool JSON match."""
        candidates: list[Any] = []
        replacements = data.get("replacements")
        if isinstance(replacements, list):
            for replacement in replacements:
                if isinstance(replacement, Mapping):
                    candidates.append(replacement.get("value"))
                else:
                    candidates.append(replacement)

        rule = data.get("rule")
        rule_id = None
        issue_type = None
        if isinstance(rule, Mapping):
            rule_id = rule.get("id")
            issue_type = rule.get("issueType")

        return cls(
            message=data.get("message"),
            offset=data.get("offset"),
            length=data.get("length"),
            candidates=candidates,
            rule_id=rule_id if isinstance(rule_id, str) else None,
            issue_type=issue_type if isinstance(issue_type, str) else None,
        )

    @classmethod
    def from_match(cls, match: object) -> "RawIssue":
        """Build a RawIssue from a ``language_tool_python`` Match object."""
        rule_id = getattr(match, "ruleId", None)
        issue_type = getattr(match, "ruleIssueType", None)
        return cls(
            message=getattr(match, "message", None),
            offset=getattr(match, "offset", None),
            length=getattr(match, "errorLength", None),
            candidates=list(getattr(match, "replacements", None) or []),
            rule_id=rule_id if isinstance(rule_id, str) else None,
            issue_type=issue_type if isinstance(issue_type, str) else None,
        )

    @classmethod
    def from_record(cls, record: object) -> "RawIssue":
        """Dispatch on the record shape (RawIssue, JSON mapping or Match)."""
        if isinstance(record, RawIssue):
            return record
        if isinstance(record, Mapping):
            return cls.from_json(record)
        return cls.from_match(record)


class Annotation(BaseModel):
    """A span of the checked text to highlight and replace.

    - start/end: half-open character range ``[start, end)``
    - suggestions: provider order, ``suggestions[0]`` is the primary one
    - explanation: human-readable rationale shown in verbose mode
    - rule_id: LanguageTool rule identifier, when known
    - applied_rules: patterns of the house rules already folded into the
      primary suggestion
    """

    start: int = Field(ge=0)
    end: int = Field(ge=0)
    suggestions: List[str] = Field(min_length=1)
    explanation: str
    rule_id: str | None = None
    applied_rules: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_range(self) -> "Annotation":
        if self.end < self.start:
            raise ValueError(
                f"annotation end ({self.end}) must not precede start ({self.start})"
            )
        return self

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def primary(self) -> str:
        return self.suggestions[0]
