"""Logged workout models."""

from dataclasses import dataclass
from datetime import datetime, timezone


def utc_timestamp(moment: datetime | None = None) -> str:
    """Format a moment (default: now) as an ISO-8601 string in UTC.

    Every stored date goes through here, so ordering by the text column is
    chronological. Naive datetimes are taken to be UTC already.
    """
    if moment is None:
        moment = datetime.now(timezone.utc)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")


@dataclass
class Workout:
    """A dated workout, either logged freestanding or started from a template."""

    name: str
    date: str  # ISO-8601 timestamp
    duration: int = 0  # minutes
    id: int | None = None

    def started_at(self) -> datetime:
        """Parse the stored timestamp."""
        # Older rows may carry a trailing "Z" instead of an offset
        return datetime.fromisoformat(self.date.replace("Z", "+00:00"))

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "date": self.date,
            "duration": self.duration,
        }

    @classmethod
    def from_dict(cls, data: dict, id: int | None = None) -> "Workout":
        """Create from dictionary."""
        return cls(
            name=data["name"],
            date=data.get("date") or utc_timestamp(),
            duration=data.get("duration", 0),
            id=id if id is not None else data.get("id"),
        )


@dataclass
class WorkoutExercise:
    """The sets, reps and weight actually performed for one exercise."""

    workout_id: int
    exercise_id: int
    sets: int = 0
    reps: int = 0
    weight: float = 0.0  # unit-less, shown as lbs
    id: int | None = None

    @property
    def volume(self) -> float:
        """Total load moved (sets x reps x weight)."""
        return self.sets * self.reps * self.weight

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "workout_id": self.workout_id,
            "exercise_id": self.exercise_id,
            "sets": self.sets,
            "reps": self.reps,
            "weight": self.weight,
        }


@dataclass
class WorkoutExerciseDetail(WorkoutExercise):
    """A workout entry joined with its exercise's display columns."""

    name: str = ""
    muscle_group: str = ""

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data = super().to_dict()
        data["name"] = self.name
        data["muscle_group"] = self.muscle_group
        return data
