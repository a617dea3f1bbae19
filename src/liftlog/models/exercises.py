"""Exercise library models."""

from dataclasses import dataclass, replace


@dataclass
class Exercise:
    """A user-defined exercise.

    The muscle group is a free-form category label ("Chest", "Legs", ...)
    chosen by the user, not a fixed vocabulary.
    """

    name: str
    muscle_group: str
    id: int | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "muscle_group": self.muscle_group,
        }

    @classmethod
    def from_dict(cls, data: dict, id: int | None = None) -> "Exercise":
        """Create from dictionary."""
        return cls(
            name=data["name"],
            muscle_group=data["muscle_group"],
            id=id if id is not None else data.get("id"),
        )


@dataclass
class ExercisePatch:
    """Partial update for an exercise.

    Fields left as None keep their current value. Applying a patch always
    yields a complete row, which the store writes back in full.
    """

    name: str | None = None
    muscle_group: str | None = None

    def is_empty(self) -> bool:
        return self.name is None and self.muscle_group is None

    def apply(self, exercise: Exercise) -> Exercise:
        """Merge this patch over an existing exercise."""
        return replace(
            exercise,
            name=self.name if self.name is not None else exercise.name,
            muscle_group=(
                self.muscle_group if self.muscle_group is not None else exercise.muscle_group
            ),
        )
