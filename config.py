"""Application configuration."""
import os
from dataclasses import dataclass
from typing import Optional

from web2lead.config import LeadConfig


@dataclass
class AppConfig:
    """Application configuration."""

    config_file: Optional[str] = None
    lead: LeadConfig = None

    def __post_init__(self):
        """Initialize default values."""
        if self.lead is None:
            if self.config_file:
                self.lead = LeadConfig.from_file(self.config_file)
            else:
                self.lead = LeadConfig.from_env()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load config from environment variables."""
        return cls(config_file=os.getenv("WEB2LEAD_CONFIG") or None)


# Global instance
app_config = AppConfig.from_env()
