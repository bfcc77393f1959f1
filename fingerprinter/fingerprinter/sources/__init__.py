"""Discovery and download of published release archives."""

from fingerprinter.sources.remote import RemoteVersionIndex, download_and_extract

__all__ = [
    "RemoteVersionIndex",
    "download_and_extract",
]
