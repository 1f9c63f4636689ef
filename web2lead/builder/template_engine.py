"""
Template Engine - Default token resolver for custom data values

Tokens are resolved against the submission being posted:
- ${key} substitutes a scalar value; composite sub-values are ${parent_child}
- ${if key ? yes : no} picks a branch on whether the value is truthy;
  composite parents count as truthy when any sub-value is set
"""

import logging
import re
from typing import Any, Dict, Optional

from .field_builder import is_empty, iter_flattened, to_payload_value

logger = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r'\$\{\s*([^}?]+?)\s*\}')
CONDITIONAL_PATTERN = re.compile(r'\$\{if\s+([^?}]+?)\s*\?\s*([^:}]*?)\s*:\s*([^}]*?)\s*\}')


class SubmissionContext:
    """Token values of one submission."""

    def __init__(self, submission: Dict[str, Any], defaults: Optional[Dict[str, Any]] = None):
        self.values = dict(defaults or {})
        self.values.update(iter_flattened(submission))
        self.submission = submission

    def value(self, name: str) -> Optional[str]:
        value = self.values.get(name)
        if value is None or isinstance(value, (dict, list, tuple)):
            return None
        return to_payload_value(value)

    def is_set(self, name: str) -> bool:
        if name in self.values:
            return bool(self.values[name]) and not is_empty(self.values[name])
        parent = self.submission.get(name)
        if isinstance(parent, dict):
            return any(not is_empty(v) for v in parent.values())
        if isinstance(parent, (list, tuple)):
            return any(not is_empty(v) for v in parent)
        return False


class TemplateEngine:
    """Resolves ``${...}`` tokens in custom data against a submission"""

    def __init__(self, defaults: Optional[Dict[str, Any]] = None):
        """
        Args:
            defaults: Values used for tokens the submission does not carry
        """
        self.defaults = defaults or {}

    def __call__(self, template: Any, submission: Optional[Dict[str, Any]] = None) -> Any:
        return self.resolve(template, submission)

    def resolve(self, template: Any, submission: Optional[Dict[str, Any]] = None) -> Any:
        """Resolve tokens in ``template``; non-string values pass through."""
        if not isinstance(template, str):
            return template

        context = SubmissionContext(submission or {}, self.defaults)

        def branch(match):
            return match.group(2) if context.is_set(match.group(1)) else match.group(3)

        def token(match):
            name = match.group(1)
            value = context.value(name)
            if value is None:
                logger.warning(f"Token not found in submission: {name}")
                return ""
            return value

        return TOKEN_PATTERN.sub(token, CONDITIONAL_PATTERN.sub(branch, template))
