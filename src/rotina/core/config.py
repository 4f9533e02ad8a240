from __future__ import annotations

import pendulum

from dataclasses import dataclass, field
from typing import Any, Dict, List

DEFAULT_DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


@dataclass
class Config:
    """Configuration for rotina. This object includes the default values."""
    timezone: pendulum.Timezone = field(default_factory=lambda: pendulum.now().timezone)
    log_level: str = "WARNING"
    data_file: str = "activities.toml"
    days: List[str] = field(default_factory=lambda: list(DEFAULT_DAYS))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Config:
        if "timezone" in data:
            timezone = pendulum.timezone(data.get("timezone"))
        else:
            timezone = pendulum.now().timezone
        log_level = str(data.get("log_level", "WARNING")).upper()
        data_file = data.get("data_file", "activities.toml")
        days = data.get("days", list(DEFAULT_DAYS))
        if not isinstance(days, list) or not all(isinstance(d, str) and d for d in days):
            raise ValueError("'days' must be a list of non-empty strings")
        return cls(timezone, log_level, data_file, days)

