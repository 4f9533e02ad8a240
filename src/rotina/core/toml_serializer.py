import tomllib
import tomli_w

from typing import Iterable, List

from rotina.models import Activity


class TomlSerializer:
    """
    Converts the activity collection to and from a single TOML document:

        version = 1

        [[activities]]
        id = 1
        day = "Wednesday"
        description = "Read chapter 1"

    The next id is not stored; it is a function of the collection.
    """

    VERSION = 1

    @classmethod
    def serialize(cls, activities: Iterable[Activity]) -> str:
        return tomli_w.dumps({
            "version": cls.VERSION,
            "activities": [activity.to_dict() for activity in activities],
        })

    @classmethod
    def deserialize(cls, text: str) -> List[Activity]:
        """
        Parses a document into activities.
        Raises:
            tomllib.TOMLDecodeError: If the text is not valid TOML.
            ValueError: If the records are malformed or ids repeat.
        """
        data = tomllib.loads(text)
        records = data.get("activities", [])
        if not isinstance(records, list):
            raise ValueError("'activities' must be an array of tables")

        activities = []
        seen = set()
        for record in records:
            if not isinstance(record, dict):
                raise ValueError(f"Invalid activity record: {record!r}")
            try:
                activity = Activity.from_dict(record)
            except KeyError as e:
                raise ValueError(f"Activity record is missing {e}") from e
            if activity.id in seen:
                raise ValueError(f"Duplicate activity id {activity.id}")
            seen.add(activity.id)
            activities.append(activity)

        return activities
