"""
Payload Builder Module

Builds flat Web-to-Lead payloads from form submission data with:
- Field mapping (composite fields flattened to <parent>_<child>)
- Custom data overrides parsed from YAML blocks
- Token substitution in custom data values
- Alter hooks for last-minute payload changes
"""

from .payload_builder import PayloadBuilder, build_lead_payload
from .field_builder import FieldBuilder, flatten_submission
from .template_engine import TemplateEngine
from .custom_data import load_custom_data, parse_custom_data

__all__ = [
    "PayloadBuilder",
    "FieldBuilder",
    "TemplateEngine",
    "build_lead_payload",
    "flatten_submission",
    "load_custom_data",
    "parse_custom_data",
]
