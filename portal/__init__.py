"""Multi-tenant client portal backend."""

__version__ = "1.0.0"
