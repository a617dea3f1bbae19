"""Request bodies for the JSON API."""

from datetime import datetime

from pydantic import BaseModel, Field


class ExerciseIn(BaseModel):
    name: str = Field(min_length=1)
    muscle_group: str = Field(min_length=1)


class ExerciseUpdate(BaseModel):
    """Partial update; omitted fields keep their current value."""

    name: str | None = Field(default=None, min_length=1)
    muscle_group: str | None = Field(default=None, min_length=1)


class WorkoutExerciseIn(BaseModel):
    exercise_id: int
    sets: int = Field(default=0, ge=0)
    reps: int = Field(default=0, ge=0)
    weight: float = Field(default=0.0, ge=0)


class WorkoutIn(BaseModel):
    name: str = Field(min_length=1)
    date: datetime | None = None  # defaults to now
    duration: int = Field(default=0, ge=0)
    exercises: list[WorkoutExerciseIn] = []


class TemplateExerciseIn(BaseModel):
    exercise_id: int
    set_count: int = Field(default=0, ge=0)
    target_reps: int = Field(default=0, ge=0)
    target_weight: float | None = Field(default=None, ge=0)
    order: int | None = Field(default=None, ge=0)  # appended when omitted


class TemplateIn(BaseModel):
    name: str = Field(min_length=1)
    exercises: list[TemplateExerciseIn] = []
