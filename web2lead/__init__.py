"""Form submission to Web-to-Lead bridge."""

__version__ = "0.1.0"
