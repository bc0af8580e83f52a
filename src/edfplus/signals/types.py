"""Annotation type definitions."""

from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field


class TimestampedAnnotation(BaseModel):
    """An EDF+ annotation: onset, optional duration and one or more texts."""

    model_config = ConfigDict(frozen=True)

    base: datetime = Field(description="Recording start the onset is relative to")
    onset: float = Field(ge=0, description="Seconds from base")
    duration: float = Field(default=0.0, ge=0, description="Duration (seconds)")
    annotations: list[str] = Field(description="Annotation strings")
    record_index: int = Field(ge=0, description="Data record the TAL was read from")

    def time(self) -> datetime:
        """Absolute onset time."""
        return self.base + timedelta(seconds=self.onset)

    def end(self) -> datetime:
        """Absolute end time (onset plus duration)."""
        return self.time() + timedelta(seconds=self.duration)
