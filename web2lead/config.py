"""Web-to-Lead handler settings."""
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Union

import yaml


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class LeadConfig:
    """Web-to-Lead handler settings."""

    endpoint_url: str = ""
    organization_id: str = ""
    field_mapping: Dict[str, Any] = field(default_factory=dict)
    custom_data: str = ""  # YAML block, applied to every post
    insert_data: str = ""  # YAML block, applied when a submission is created
    debug: bool = False
    timeout: int = 30

    @classmethod
    def from_env(cls) -> "LeadConfig":
        """Load config from environment variables."""
        mapping = os.getenv("WEB2LEAD_FIELD_MAPPING", "")
        return cls(
            endpoint_url=os.getenv("WEB2LEAD_URL", ""),
            organization_id=os.getenv("WEB2LEAD_OID", ""),
            field_mapping=json.loads(mapping) if mapping else {},
            custom_data=os.getenv("WEB2LEAD_CUSTOM_DATA", ""),
            insert_data=os.getenv("WEB2LEAD_INSERT_DATA", ""),
            debug=_env_flag("WEB2LEAD_DEBUG"),
            timeout=int(os.getenv("WEB2LEAD_TIMEOUT", "30")),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LeadConfig":
        """
        Build config from a settings dictionary.

        Accepts the handler's own setting names as well as the
        ``salesforce_url`` / ``salesforce_oid`` / ``salesforce_mapping``
        names used by exported webform handler settings.
        """
        data = data or {}
        return cls(
            endpoint_url=data.get("endpoint_url", data.get("salesforce_url", "")) or "",
            organization_id=str(data.get("organization_id", data.get("salesforce_oid", "")) or ""),
            field_mapping=data.get("field_mapping", data.get("salesforce_mapping", {})) or {},
            custom_data=_as_yaml_block(data.get("custom_data", "")),
            insert_data=_as_yaml_block(data.get("insert_data", "")),
            debug=bool(data.get("debug", False)),
            timeout=int(data.get("timeout", 30)),
        )

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "LeadConfig":
        """Load config from a YAML or JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})


def _as_yaml_block(value: Any) -> str:
    """Custom data may be given inline as a mapping; store it as YAML text."""
    if not value:
        return ""
    if isinstance(value, dict):
        return yaml.safe_dump(value, default_flow_style=False)
    return str(value)

