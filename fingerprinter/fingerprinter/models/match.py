"""Per-version outcome of a live match run."""

from __future__ import annotations

from pydantic import BaseModel, Field, computed_field


class VersionScore(BaseModel):
    """How many candidate files of one version matched the target."""

    version: str = Field(..., min_length=1)
    total: int = Field(..., ge=0, description="Size of the candidate set.")
    matches: int = Field(default=0, ge=0)
    unique: bool = Field(
        default=False,
        description="Whether the candidate set was the unique fingerprints only.",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def percent(self) -> float:
        return match_percent(self.matches, self.total)

    @property
    def identified(self) -> bool:
        """A unique-fingerprint hit is a strong positive identification."""
        return self.unique and self.matches > 0


def match_percent(matches: int, total: int) -> float:
    """Return ``matches / total`` as a percentage rounded to two decimals."""
    if total <= 0:
        return 0.0
    return round(matches / total * 100, 2)
