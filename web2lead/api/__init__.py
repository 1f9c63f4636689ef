"""Web-to-Lead HTTP posting."""

from .lead_client import WebToLeadClient
from .lead_poster import LeadPostHandler

__all__ = ["WebToLeadClient", "LeadPostHandler"]
