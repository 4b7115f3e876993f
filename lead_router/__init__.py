"""Lead routing & assignment engine for the real-estate CRM."""

__version__ = "0.1.0"
