"""
Artifact model — a named output unit, produced by all generators.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Artifact(BaseModel):
    """A fully composed output file (or insertion into one).

    Attributes:
        filename:        Output path relative to the generation root.
        content:         Full text content.
        insertion_point: Named insertion point inside an existing file,
                         or None to create ``filename``.
        reason:          Why this artifact was generated.
    """

    model_config = ConfigDict(frozen=True)

    filename: str
    content: str
    insertion_point: str | None = None
    reason: str = ""

    @property
    def target(self) -> str:
        """Human-readable target, including the insertion point if any."""
        if self.insertion_point:
            return f"{self.filename}@{self.insertion_point}"
        return self.filename
