"""Heuristic mapping engine for auto-detecting Web-to-Lead field mappings."""
from typing import Dict, List, Optional
from difflib import SequenceMatcher

from web2lead.mapper.mapping import CAMPAIGN_FIELDS


class HeuristicMapper:
    """Suggest submission key -> campaign field mappings using heuristics."""

    COMMON_FIELD_MAPPINGS = {
        "mail": "email",
        "e_mail": "email",
        "email_address": "email",
        "telephone": "phone",
        "phone_number": "phone",
        "mobile": "phone",
        "tel": "phone",
        "first": "first_name",
        "firstname": "first_name",
        "given_name": "first_name",
        "name_first": "first_name",
        "last": "last_name",
        "lastname": "last_name",
        "surname": "last_name",
        "family_name": "last_name",
        "name_last": "last_name",
        "message": "description",
        "comments": "description",
        "comment": "description",
        "details": "description",
        "source": "lead_source",
        "utm_source": "lead_source",
    }

    def __init__(self, destinations: Optional[List[str]] = None, threshold: float = 0.75):
        """Initialize mapper with the destination fields to match against."""
        self.destinations = destinations or list(CAMPAIGN_FIELDS)
        self.threshold = threshold

    def suggest(self, sources: List[str]) -> Dict[str, str]:
        """Generate mapping suggestions; each destination is used at most once."""
        mapping = {}
        taken = set()

        for source in sources:
            destination = self._find_destination(source)
            if destination and destination not in taken:
                mapping[source] = destination
                taken.add(destination)

        return mapping

    def _find_destination(self, source: str) -> Optional[str]:
        """Find matching destination field."""
        source_lower = source.lower().strip()

        # Exact match
        for destination in self.destinations:
            if destination.lower() == source_lower:
                return destination

        # Common mapping
        if source_lower in self.COMMON_FIELD_MAPPINGS:
            target = self.COMMON_FIELD_MAPPINGS[source_lower]
            if target in self.destinations:
                return target

        # Fuzzy match
        best_match = None
        best_ratio = self.threshold

        for destination in self.destinations:
            ratio = SequenceMatcher(None, source_lower, destination.lower()).ratio()

            if ratio > best_ratio:
                best_ratio = ratio
                best_match = destination

        return best_match
