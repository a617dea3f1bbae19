"""Workout template models."""

from dataclasses import dataclass

from .workouts import WorkoutExercise


@dataclass
class WorkoutTemplate:
    """A named, reusable workout blueprint."""

    name: str
    id: int | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"id": self.id, "name": self.name}


@dataclass
class TemplateExercise:
    """A prescribed exercise slot within a template.

    `order` is the zero-based position of the slot in its template. It is
    assigned when the template is built and is never renumbered, so a
    template that has lost a slot may have gaps.
    """

    template_id: int
    exercise_id: int
    set_count: int = 0
    target_reps: int = 0
    target_weight: float | None = None  # None means "unspecified"
    order: int = 0
    id: int | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "template_id": self.template_id,
            "exercise_id": self.exercise_id,
            "set_count": self.set_count,
            "target_reps": self.target_reps,
            "target_weight": self.target_weight,
            "order": self.order,
        }

    def to_workout_exercise(self, workout_id: int) -> WorkoutExercise:
        """Materialize this slot as a workout entry.

        An unspecified target weight becomes 0.
        """
        return WorkoutExercise(
            workout_id=workout_id,
            exercise_id=self.exercise_id,
            sets=self.set_count,
            reps=self.target_reps,
            weight=self.target_weight if self.target_weight is not None else 0,
        )


@dataclass
class TemplateExerciseDetail(TemplateExercise):
    """A template slot joined with its exercise's display columns."""

    name: str = ""
    muscle_group: str = ""

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data = super().to_dict()
        data["name"] = self.name
        data["muscle_group"] = self.muscle_group
        return data
