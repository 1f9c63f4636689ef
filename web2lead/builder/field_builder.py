"""
Field Builder - Turns submitted values into flat Web-to-Lead fields

Supports:
- Direct field mapping (submission key → destination field)
- Composite fields flattened to <parent>_<child> keys
- Multi-value (list) fields flattened to <parent>_<index> keys
- String normalisation of scalar values
"""

from typing import Any, Dict, Iterator, Optional, Tuple
import logging

logger = logging.getLogger(__name__)


def is_empty(value: Any) -> bool:
    """Values that must never reach (or overwrite) a payload field."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (dict, list, tuple, set)):
        return len(value) == 0
    return False


def to_payload_value(value: Any) -> str:
    """Convert a scalar to the string posted on the wire."""
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def _children(value: Any) -> Optional[Iterator[Tuple[str, Any]]]:
    if isinstance(value, dict):
        return ((str(k), v) for k, v in value.items())
    if isinstance(value, (list, tuple)):
        return ((str(i), v) for i, v in enumerate(value))
    return None


def iter_flattened(submission: Dict[str, Any]) -> Iterator[Tuple[str, Any]]:
    """Yield submission pairs in order, expanding one level of composite values"""
    for key, value in submission.items():
        children = _children(value)
        if children is None:
            yield key, value
            continue
        for sub_key, sub_value in children:
            yield f"{key}_{sub_key}", sub_value


def flatten_submission(submission: Dict[str, Any]) -> Dict[str, Any]:
    """
    Flatten one level of composite values

    Transforms:
        {"name": {"first": "Jane", "last": "Doe"}, "email": "j@x.com"}
    Into:
        {"name_first": "Jane", "name_last": "Doe", "email": "j@x.com"}
    """
    return dict(iter_flattened(submission))


class FieldBuilder:
    """Builds destination fields from a submission and a mapping table"""

    def __init__(self, field_mapping: Dict[str, str]):
        """
        Initialize FieldBuilder

        Args:
            field_mapping: Submission key → destination field name
        """
        self.field_mapping = field_mapping or {}

    def build_field(self, key: str, value: Any) -> Tuple[Optional[str], Optional[str]]:
        """
        Build a single destination field

        Returns:
            Tuple of (destination_field_name, value); either is None when
            the pair must be skipped
        """
        destination = self.field_mapping.get(key)
        if not destination:
            return None, None

        if is_empty(value):
            return destination, None

        if _children(value) is not None:
            # Nested deeper than one composite level: nothing sensible to post
            logger.warning(f"Skipping non-scalar value for '{key}'")
            return destination, None

        return destination, to_payload_value(value)

    def build_fields(self, submission: Dict[str, Any]) -> Iterator[Tuple[str, str]]:
        """Yield (destination, value) for every mapped, non-empty submission value"""
        for key, value in iter_flattened(submission):
            destination, field_value = self.build_field(key, value)
            if destination is None or field_value is None:
                continue
            yield destination, field_value
