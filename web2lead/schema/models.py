"""Models for form definitions, submissions and post results."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


# Submitted data: field key -> scalar, or nested mapping for composite fields
SubmissionRecord = Dict[str, Any]

# Flat destination field -> string value, always carries "oid"
LeadPayload = Dict[str, str]


class Operation(str, Enum):
    """Submission lifecycle operation."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"

    @classmethod
    def parse(cls, value: Any) -> "Operation":
        """Accept an Operation or its string value."""
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


@dataclass
class FormElement:
    """A single element of a form."""

    key: str
    title: str = ""
    composite_elements: Dict[str, str] = field(default_factory=dict)  # sub key -> sub title

    @property
    def is_composite(self) -> bool:
        return bool(self.composite_elements)


@dataclass
class FormDefinition:
    """Represents the form a submission belongs to."""

    id: str
    label: str = ""
    elements: List[FormElement] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FormDefinition":
        """
        Build a form definition from a dictionary.

        Elements may be a list of ``{"key", "title", "composite"}`` dicts or
        a mapping of key -> title / element dict.
        """
        raw_elements = data.get("elements", [])
        if isinstance(raw_elements, dict):
            raw_elements = [
                dict(value, key=key) if isinstance(value, dict) else {"key": key, "title": value}
                for key, value in raw_elements.items()
            ]

        elements = []
        for raw in raw_elements:
            composite = raw.get("composite") or raw.get("composite_elements") or {}
            elements.append(
                FormElement(
                    key=raw["key"],
                    title=raw.get("title") or "",
                    composite_elements={str(k): str(v) for k, v in composite.items()},
                )
            )

        return cls(
            id=str(data.get("id", "")),
            label=data.get("label") or str(data.get("id", "")),
            elements=elements,
        )


@dataclass
class PostError:
    """Failed post: original message and the response, if one was received."""

    message: str
    response: Optional[Any] = None

    @property
    def status_code(self) -> Optional[int]:
        return getattr(self.response, "status_code", None)


@dataclass
class PostResult:
    """Outcome of a single Web-to-Lead POST."""

    ok: bool
    response: Optional[Any] = None
    error: Optional[PostError] = None
    payload: LeadPayload = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "ok": self.ok,
            "status_code": getattr(self.response, "status_code", None),
            "error": self.error.message if self.error else None,
            "payload": dict(self.payload),
        }
