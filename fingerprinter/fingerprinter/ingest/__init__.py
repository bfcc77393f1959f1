"""Turning extracted release trees into fingerprint rows."""

from fingerprinter.ingest.batch import BatchUpdater
from fingerprinter.ingest.hashing import md5_bytes, md5_file
from fingerprinter.ingest.ignore import IgnorePredicate
from fingerprinter.ingest.ingestor import Ingestor, relative_path_value

__all__ = [
    "BatchUpdater",
    "IgnorePredicate",
    "Ingestor",
    "md5_bytes",
    "md5_file",
    "relative_path_value",
]
