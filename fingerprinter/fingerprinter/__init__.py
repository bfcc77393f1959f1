"""Version fingerprinting engine: corpus ingestion, unique fingerprints and live matching."""

__version__ = "0.3.0"
