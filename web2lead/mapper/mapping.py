"""Field mapping model: submission keys -> Web-to-Lead fields."""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Union

from web2lead.schema.models import FormDefinition

logger = logging.getLogger(__name__)

# Typical Web-to-Lead campaign fields offered as mapping destinations
CAMPAIGN_FIELDS = ["description", "email", "first_name", "last_name", "lead_source", "phone"]

# Destination value meaning "use the free-text value instead"
OTHER = "_other_"


@dataclass
class MappingEntry:
    """One row of the mapping table."""

    source: str
    destination: Optional[str] = None
    other_value: str = ""

    def resolve(self) -> Optional[str]:
        """Return the effective destination, or None if the row is unusable."""
        destination = (self.destination or "").strip()
        if destination == OTHER:
            destination = (self.other_value or "").strip()
        return destination or None


def _entries_from_raw(raw: Union[Dict[str, Any], Iterable[Any]]) -> List[MappingEntry]:
    if isinstance(raw, dict):
        entries = []
        for source, destination in raw.items():
            if isinstance(destination, dict):
                # select-other widget value: {"select": "_other_", "other": "Company"}
                entries.append(
                    MappingEntry(
                        source=source,
                        destination=destination.get("select") or destination.get("destination"),
                        other_value=destination.get("other") or destination.get("other_value") or "",
                    )
                )
            else:
                entries.append(MappingEntry(source=source, destination=destination))
        return entries

    entries = []
    for item in raw:
        if isinstance(item, MappingEntry):
            entries.append(item)
        else:
            entries.append(
                MappingEntry(
                    source=item["source"],
                    destination=item.get("destination"),
                    other_value=item.get("other_value", ""),
                )
            )
    return entries


def resolve_mapping(raw: Union[Dict[str, Any], Iterable[Any], None]) -> Dict[str, str]:
    """
    Build a flat FieldMapping (source -> destination) from configured rows.

    Rows pointing at the "other" sentinel resolve to their free-text value;
    rows with no usable destination are dropped.
    """
    if not raw:
        return {}

    mapping = {}
    for entry in _entries_from_raw(raw):
        destination = entry.resolve()
        if not destination:
            logger.debug(f"Dropping mapping for '{entry.source}': no destination")
            continue
        mapping[entry.source] = destination
    return mapping


def available_sources(
    form: FormDefinition,
    extra_fields: Optional[Dict[str, Dict[str, str]]] = None,
) -> Dict[str, str]:
    """
    List submission keys that can be mapped, with a human label.

    Composite elements contribute one ``<key>_<sub>`` entry per sub-element.
    ``extra_fields`` are submission-level fields such as ``sid`` given as
    ``{key: {"title": ..., "type": ...}}``.
    """
    sources = {}
    for element in form.elements:
        if element.is_composite:
            for sub_key, sub_title in element.composite_elements.items():
                sources[f"{element.key}_{sub_key}"] = f"{element.title} - {sub_title}"
            continue
        if element.key.startswith("#") or not element.title:
            continue
        sources[element.key] = element.title

    for key, definition in (extra_fields or {}).items():
        sources[key] = f"{definition.get('title', key)} (type : {definition.get('type', 'string')})"

    return sources
