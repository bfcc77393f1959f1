"""Models describing remote releases and the outcome of a corpus update."""

from __future__ import annotations

from pydantic import BaseModel, Field


class RemoteRelease(BaseModel):
    """A published version and where to download its archive."""

    version: str = Field(..., min_length=1)
    download_url: str = Field(..., min_length=1)


class UpdateReport(BaseModel):
    """What a batch update did with each version it saw."""

    ingested: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(
        default_factory=list,
        description="Versions already in the corpus.",
    )
    failed: dict[str, str] = Field(
        default_factory=dict,
        description="Version number -> error message for recoverable failures.",
    )

    @property
    def attempted(self) -> int:
        return len(self.ingested) + len(self.skipped) + len(self.failed)
