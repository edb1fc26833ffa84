"""Health data snapshots and language-model check-ins."""

__version__ = "0.1.0"
