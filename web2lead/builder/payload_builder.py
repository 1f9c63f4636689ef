"""
Payload Builder - Assembles the flat Web-to-Lead payload

Integrates:
- FieldBuilder: Mapped submission values (composite fields flattened)
- TemplateEngine: Default token resolver for custom data values
- Alter hooks: Callables allowed to mutate the payload before it is sent

Precedence (lowest to highest): mapped submission data, general custom
data, operation-specific custom data. The ``oid`` field always carries the
configured organization id; only alter hooks may change it.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from .field_builder import FieldBuilder, is_empty, to_payload_value
from .template_engine import TemplateEngine

logger = logging.getLogger(__name__)

# resolve(template, submission) -> str
TokenResolver = Callable[[Any, Dict[str, Any]], Any]

# hook(payload, form, submission), mutates payload in place
AlterHook = Callable[[Dict[str, str], Any, Dict[str, Any]], None]


class PayloadBuilder:
    """
    Builds Web-to-Lead payloads from submission data

    Usage:
    ```python
    builder = PayloadBuilder(hooks=[add_campaign_id])
    payload = builder.build(
        submission={"name": {"first": "Jane"}, "mail": "jane@example.com"},
        field_mapping={"name_first": "first_name", "mail": "email"},
        custom_overrides={"lead_source": "Web"},
        organization_id="00D000000000001",
    )
    # Returns: {"oid": "00D000000000001", "first_name": "Jane",
    #           "email": "jane@example.com", "lead_source": "Web"}
    ```
    """

    def __init__(
        self,
        resolver: Optional[TokenResolver] = None,
        hooks: Optional[List[AlterHook]] = None,
    ):
        """
        Initialize PayloadBuilder

        Args:
            resolver: Token resolver applied to custom data values
            hooks: Alter hooks run after all builtin logic
        """
        self.resolver = resolver or TemplateEngine()
        self.hooks = list(hooks or [])

    def build(
        self,
        submission: Dict[str, Any],
        field_mapping: Dict[str, str],
        custom_overrides: Optional[Dict[str, Any]] = None,
        organization_id: str = "",
        operation_overrides: Optional[Dict[str, Any]] = None,
        form: Any = None,
    ) -> Dict[str, str]:
        """
        Build a complete Web-to-Lead payload

        Args:
            submission: Submitted data (composite values as nested dicts)
            field_mapping: Submission key → destination field
            custom_overrides: General custom data, wins over mapped data
            organization_id: Value of the ``oid`` field
            operation_overrides: Operation-specific custom data, wins over
                general custom data
            form: Form definition handed to alter hooks

        Returns:
            Flat payload dictionary ready for a URL-encoded POST
        """
        submission = submission or {}
        oid = to_payload_value(organization_id or "")
        payload = {"oid": oid}

        for destination, value in FieldBuilder(field_mapping).build_fields(submission):
            payload[destination] = value

        for overrides in (custom_overrides, operation_overrides):
            self._apply_overrides(payload, overrides, submission)

        # oid is reserved for the configured organization id
        if payload["oid"] != oid:
            logger.warning("Ignoring mapped or custom value for reserved field 'oid'")
            payload["oid"] = oid

        self._run_hooks(payload, form, submission)

        return payload

    def add_hook(self, hook: AlterHook) -> None:
        """Register an alter hook"""
        self.hooks.append(hook)

    def _apply_overrides(
        self,
        payload: Dict[str, str],
        overrides: Optional[Dict[str, Any]],
        submission: Dict[str, Any],
    ) -> None:
        if not overrides:
            return

        for key, template in overrides.items():
            if isinstance(template, (dict, list)):
                logger.warning(f"Skipping non-scalar custom data value for '{key}'")
                continue

            value = self.resolver(template, submission)
            if is_empty(value):
                continue

            payload[str(key)] = to_payload_value(value)

    def _run_hooks(self, payload: Dict[str, str], form: Any, submission: Dict[str, Any]) -> None:
        for hook in self.hooks:
            hook(payload, form, submission)


# ============================================================================
# Builder convenience functions
# ============================================================================


def build_lead_payload(
    submission: Dict[str, Any],
    field_mapping: Dict[str, str],
    custom_overrides: Optional[Dict[str, Any]] = None,
    organization_id: str = "",
) -> Dict[str, str]:
    """Build a payload with the default resolver and no hooks"""
    return PayloadBuilder().build(submission, field_mapping, custom_overrides, organization_id)
