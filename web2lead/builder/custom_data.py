"""Parse custom data blocks (YAML) into destination overrides."""
import logging
from typing import Any, Dict, Optional

import yaml

from web2lead.errors import MappingError

logger = logging.getLogger(__name__)


def load_custom_data(block: Optional[str]) -> Dict[str, Any]:
    """
    Parse a YAML custom data block.

    Raises:
        MappingError: If the block is not valid YAML or not a mapping
    """
    if not block or not str(block).strip():
        return {}

    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as e:
        raise MappingError(f"Invalid custom data: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise MappingError(f"Custom data must be a mapping, got {type(data).__name__}")

    return {str(key): value for key, value in data.items()}


def parse_custom_data(block: Optional[str]) -> Dict[str, Any]:
    """Parse a custom data block, treating malformed blocks as empty."""
    try:
        return load_custom_data(block)
    except MappingError as e:
        logger.warning(f"Ignoring custom data: {e}")
        return {}
