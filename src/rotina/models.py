"""
The data model. There is exactly one entity: an activity recorded against a day.
Activities are immutable; editing one means building a new value with the same id
and handing it to the store.
"""

from __future__ import annotations

from dataclasses import dataclass

@dataclass(frozen=True)
class Activity:
    """A study task tied to one day label."""
    id: int  # Assigned by the store, never by the caller
    day: str  # Grouping key, e.g. "Monday". Case-sensitive.
    description: str = ""

    def __post_init__(self):
        # bool is an int subclass, but True is not an id
        if not isinstance(self.id, int) or isinstance(self.id, bool) or self.id < 1:
            raise ValueError(f"Activity id must be a positive integer, got {self.id!r}")
        if not isinstance(self.day, str) or not self.day:
            raise ValueError("Activity day must be a non-empty string")
        if not isinstance(self.description, str):
            raise ValueError("Activity description must be a string")

    @classmethod
    def from_dict(cls, data: dict) -> Activity:
        return cls(
            id=data["id"],
            day=data["day"],
            description=data.get("description", "")
        )

    def to_dict(self) -> dict:
        return {"id": self.id, "day": self.day, "description": self.description}
