"""Data models for liftlog."""

from .exercises import Exercise, ExercisePatch
from .templates import TemplateExercise, TemplateExerciseDetail, WorkoutTemplate
from .workouts import Workout, WorkoutExercise, WorkoutExerciseDetail, utc_timestamp

__all__ = [
    "Exercise",
    "ExercisePatch",
    "TemplateExercise",
    "TemplateExerciseDetail",
    "Workout",
    "WorkoutExercise",
    "WorkoutExerciseDetail",
    "WorkoutTemplate",
    "utc_timestamp",
]
