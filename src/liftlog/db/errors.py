"""Errors raised by the workout store.

Engine failures (the database cannot be opened, a foreign key points at a
missing row, ...) are not wrapped; they surface as the `sqlite3.Error`
subclasses that aiosqlite re-exports.
"""


class StoreError(Exception):
    """Base class for store-level errors."""

    pass


class NotFoundError(StoreError):
    """Raised when an operation targets a row that does not exist."""

    entity = "Row"

    def __init__(self, entity_id: int):
        self.entity_id = entity_id
        super().__init__(f"{self.entity} with id {entity_id} not found")


class ExerciseNotFoundError(NotFoundError):
    entity = "Exercise"


class WorkoutNotFoundError(NotFoundError):
    entity = "Workout"


class TemplateNotFoundError(NotFoundError):
    entity = "Template"
