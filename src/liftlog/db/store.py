"""Data access layer for liftlog.

All reads and writes go through a single `WorkoutStore`, which owns one
aiosqlite connection for its whole lifetime. aiosqlite runs statements on a
dedicated thread in submission order. On top of that every operation holds
an asyncio lock, so a multi-statement transaction is never committed halfway
by another coroutine and its uncommitted rows are never seen by a reader.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from dataclasses import replace
from pathlib import Path

import aiosqlite

from ..models.exercises import Exercise, ExercisePatch
from ..models.templates import TemplateExercise, TemplateExerciseDetail, WorkoutTemplate
from ..models.workouts import (
    Workout,
    WorkoutExercise,
    WorkoutExerciseDetail,
    utc_timestamp,
)
from .engine import get_db_path, open_db
from .errors import ExerciseNotFoundError, TemplateNotFoundError

logger = logging.getLogger(__name__)


class WorkoutStore:
    """Repository for exercises, workouts and templates."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()
        self._db: aiosqlite.Connection | None = None
        self._init_task: asyncio.Future | None = None
        self._lock = asyncio.Lock()

    async def __aenter__(self) -> "WorkoutStore":
        await self._connection()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @property
    def initialized(self) -> bool:
        return self._db is not None

    async def _connection(self) -> aiosqlite.Connection:
        """Return the open connection, initializing it on first use.

        Every caller that arrives while initialization is in flight awaits
        the same task, so the file is opened and the schema applied once.
        """
        if self._db is not None:
            return self._db
        if self._init_task is None:
            self._init_task = asyncio.ensure_future(self._initialize())
        return await asyncio.shield(self._init_task)

    async def _initialize(self) -> aiosqlite.Connection:
        try:
            db = await open_db(self.db_path)
        except Exception as exc:
            logger.error("Failed to open workout database at %s: %s", self.db_path, exc)
            self._init_task = None
            raise
        self._db = db
        logger.info("Opened workout database at %s", self.db_path)
        return db

    async def close(self) -> None:
        """Close the connection. The next operation reopens it."""
        if self._init_task is not None and not self._init_task.done():
            await asyncio.wait({self._init_task})
        db, self._db, self._init_task = self._db, None, None
        if db is not None:
            await db.close()

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Run writes as one transaction: commit on success, roll back on error."""
        db = await self._connection()
        async with self._lock:
            try:
                yield db
            except BaseException:
                await db.rollback()
                raise
            await db.commit()

    @asynccontextmanager
    async def _reading(self) -> AsyncIterator[aiosqlite.Connection]:
        """Hold the lock for reads, so no open transaction is visible."""
        db = await self._connection()
        async with self._lock:
            yield db

    async def _fetch_one(self, query: str, params: tuple = ()) -> aiosqlite.Row | None:
        async with self._reading() as db:
            cursor = await db.execute(query, params)
            return await cursor.fetchone()

    async def _fetch_all(self, query: str, params: tuple = ()) -> list[aiosqlite.Row]:
        async with self._reading() as db:
            cursor = await db.execute(query, params)
            return list(await cursor.fetchall())

    # Exercises

    async def add_exercise(self, name: str, muscle_group: str) -> int:
        """Add a new exercise."""
        async with self._transaction() as db:
            return await self._insert_exercise(db, name, muscle_group)

    async def get_exercise(self, exercise_id: int) -> Exercise | None:
        """Get an exercise by ID."""
        row = await self._fetch_one("SELECT * FROM exercises WHERE id = ?", (exercise_id,))
        if row is None:
            return None
        return self._row_to_exercise(row)

    async def get_exercises(self) -> list[Exercise]:
        """List all exercises."""
        rows = await self._fetch_all("SELECT * FROM exercises")
        return [self._row_to_exercise(row) for row in rows]

    async def update_exercise(self, exercise_id: int, patch: ExercisePatch) -> Exercise:
        """Apply a partial update to an exercise and write the full row back."""
        async with self._transaction() as db:
            cursor = await db.execute("SELECT * FROM exercises WHERE id = ?", (exercise_id,))
            row = await cursor.fetchone()
            if row is None:
                raise ExerciseNotFoundError(exercise_id)

            updated = patch.apply(self._row_to_exercise(row))
            await db.execute(
                "UPDATE exercises SET name = ?, muscleGroup = ? WHERE id = ?",
                (updated.name, updated.muscle_group, exercise_id),
            )
        return updated

    async def delete_exercise(self, exercise_id: int) -> None:
        """Delete an exercise along with every workout and template entry using it."""
        async with self._transaction() as db:
            await db.execute("DELETE FROM exercises WHERE id = ?", (exercise_id,))

    # Workouts

    async def add_workout(self, workout: Workout) -> int:
        """Create a new workout."""
        async with self._transaction() as db:
            return await self._insert_workout(db, workout)

    async def get_workout(self, workout_id: int) -> Workout | None:
        """Get a workout by ID."""
        row = await self._fetch_one("SELECT * FROM workouts WHERE id = ?", (workout_id,))
        if row is None:
            return None
        return self._row_to_workout(row)

    async def get_workouts(self) -> list[Workout]:
        """List all workouts, most recent first."""
        rows = await self._fetch_all("SELECT * FROM workouts ORDER BY date DESC")
        return [self._row_to_workout(row) for row in rows]

    async def delete_workout(self, workout_id: int) -> None:
        """Delete a workout and its logged exercises."""
        async with self._transaction() as db:
            await db.execute("DELETE FROM workouts WHERE id = ?", (workout_id,))

    async def add_exercise_to_workout(self, entry: WorkoutExercise) -> int:
        """Log an exercise against a workout.

        Both ids must exist; the foreign keys reject anything else with an
        IntegrityError.
        """
        async with self._transaction() as db:
            return await self._insert_workout_exercise(db, entry)

    async def get_workout_exercises(self, workout_id: int) -> list[WorkoutExerciseDetail]:
        """Get the exercises logged for a workout, with exercise names."""
        rows = await self._fetch_all(
            """
            SELECT we.*, e.name, e.muscleGroup
            FROM workout_exercises we
            JOIN exercises e ON we.exercise_id = e.id
            WHERE we.workout_id = ?
            """,
            (workout_id,),
        )
        return [self._row_to_workout_exercise(row) for row in rows]

    async def log_workout(self, workout: Workout, entries: Iterable[WorkoutExercise]) -> int:
        """Create a workout together with its exercises in one transaction.

        The `workout_id` of each entry is ignored and replaced by the id of
        the new workout.
        """
        async with self._transaction() as db:
            workout_id = await self._insert_workout(db, workout)
            for entry in entries:
                await self._insert_workout_exercise(db, replace(entry, workout_id=workout_id))
        return workout_id

    # Templates

    async def create_template(self, template: WorkoutTemplate) -> int:
        """Create a new (empty) template."""
        async with self._transaction() as db:
            return await self._insert_template(db, template)

    async def get_template(self, template_id: int) -> WorkoutTemplate | None:
        """Get a template by ID."""
        async with self._reading() as db:
            return await self._select_template(db, template_id)

    async def get_templates(self) -> list[WorkoutTemplate]:
        """List all templates."""
        rows = await self._fetch_all("SELECT * FROM workout_templates")
        return [WorkoutTemplate(id=row["id"], name=row["name"]) for row in rows]

    async def delete_template(self, template_id: int) -> None:
        """Delete a template and its exercise slots."""
        async with self._transaction() as db:
            await db.execute("DELETE FROM workout_templates WHERE id = ?", (template_id,))

    async def add_exercise_to_template(self, entry: TemplateExercise) -> int:
        """Add an exercise slot to a template."""
        async with self._transaction() as db:
            return await self._insert_template_exercise(db, entry)

    async def get_template_exercises(self, template_id: int) -> list[TemplateExerciseDetail]:
        """Get a template's exercise slots in template order."""
        async with self._reading() as db:
            return await self._select_template_exercises(db, template_id)

    async def create_template_with_exercises(
        self, template: WorkoutTemplate, entries: Iterable[TemplateExercise]
    ) -> int:
        """Create a template and its slots in one transaction.

        Slots are numbered 0..N-1 in the order given; the `template_id` and
        `order` already set on each entry are ignored.
        """
        async with self._transaction() as db:
            template_id = await self._insert_template(db, template)
            for index, entry in enumerate(entries):
                await self._insert_template_exercise(
                    db, replace(entry, template_id=template_id, order=index)
                )
        return template_id

    async def start_workout_from_template(self, template_id: int) -> int:
        """Start a new workout from a template.

        The workout takes the template's name, is dated now and has a duration
        of 0. Each slot becomes one logged exercise carrying the slot's
        targets. The template is read and the workout written in one
        transaction, so a failure leaves no partial workout behind and the
        template cannot disappear in between.

        Raises:
            TemplateNotFoundError: If no template has the given id.
        """
        async with self._transaction() as db:
            template = await self._select_template(db, template_id)
            if template is None:
                raise TemplateNotFoundError(template_id)

            slots = await self._select_template_exercises(db, template_id)
            workout_id = await self._insert_workout(
                db, Workout(name=template.name, date=utc_timestamp(), duration=0)
            )
            for slot in slots:
                await self._insert_workout_exercise(db, slot.to_workout_exercise(workout_id))

        logger.debug(
            "Started workout %s from template %s with %d exercise(s)",
            workout_id,
            template_id,
            len(slots),
        )
        return workout_id

    # Statements shared by locked reads and transactions

    async def _select_template(
        self, db: aiosqlite.Connection, template_id: int
    ) -> WorkoutTemplate | None:
        cursor = await db.execute("SELECT * FROM workout_templates WHERE id = ?", (template_id,))
        row = await cursor.fetchone()
        if row is None:
            return None
        return WorkoutTemplate(id=row["id"], name=row["name"])

    async def _select_template_exercises(
        self, db: aiosqlite.Connection, template_id: int
    ) -> list[TemplateExerciseDetail]:
        cursor = await db.execute(
            """
            SELECT te.*, e.name, e.muscleGroup
            FROM template_exercises te
            JOIN exercises e ON te.exercise_id = e.id
            WHERE te.template_id = ?
            ORDER BY te.order_index, te.id
            """,
            (template_id,),
        )
        return [self._row_to_template_exercise(row) for row in await cursor.fetchall()]

    # Statements shared by single and composite writes

    async def _insert_exercise(self, db: aiosqlite.Connection, name: str, muscle_group: str) -> int:
        cursor = await db.execute(
            "INSERT INTO exercises (name, muscleGroup) VALUES (?, ?)",
            (name, muscle_group),
        )
        return cursor.lastrowid

    async def _insert_workout(self, db: aiosqlite.Connection, workout: Workout) -> int:
        cursor = await db.execute(
            "INSERT INTO workouts (name, date, duration) VALUES (?, ?, ?)",
            (workout.name, workout.date, workout.duration),
        )
        return cursor.lastrowid

    async def _insert_workout_exercise(
        self, db: aiosqlite.Connection, entry: WorkoutExercise
    ) -> int:
        cursor = await db.execute(
            """
            INSERT INTO workout_exercises
            (workout_id, exercise_id, sets, reps, weight)
            VALUES (?, ?, ?, ?, ?)
            """,
            (entry.workout_id, entry.exercise_id, entry.sets, entry.reps, entry.weight),
        )
        return cursor.lastrowid

    async def _insert_template(self, db: aiosqlite.Connection, template: WorkoutTemplate) -> int:
        cursor = await db.execute(
            "INSERT INTO workout_templates (name) VALUES (?)", (template.name,)
        )
        return cursor.lastrowid

    async def _insert_template_exercise(
        self, db: aiosqlite.Connection, entry: TemplateExercise
    ) -> int:
        cursor = await db.execute(
            """
            INSERT INTO template_exercises
            (template_id, exercise_id, set_count, target_reps, target_weight, order_index)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                entry.template_id,
                entry.exercise_id,
                entry.set_count,
                entry.target_reps,
                entry.target_weight,
                entry.order,
            ),
        )
        return cursor.lastrowid

    def _row_to_exercise(self, row: aiosqlite.Row) -> Exercise:
        """Convert a database row to an Exercise."""
        return Exercise(id=row["id"], name=row["name"], muscle_group=row["muscleGroup"])

    def _row_to_workout(self, row: aiosqlite.Row) -> Workout:
        """Convert a database row to a Workout."""
        return Workout(
            id=row["id"],
            name=row["name"],
            date=row["date"],
            duration=row["duration"],
        )

    def _row_to_workout_exercise(self, row: aiosqlite.Row) -> WorkoutExerciseDetail:
        """Convert a joined database row to a WorkoutExerciseDetail."""
        return WorkoutExerciseDetail(
            id=row["id"],
            workout_id=row["workout_id"],
            exercise_id=row["exercise_id"],
            sets=row["sets"],
            reps=row["reps"],
            weight=row["weight"],
            name=row["name"],
            muscle_group=row["muscleGroup"],
        )

    def _row_to_template_exercise(self, row: aiosqlite.Row) -> TemplateExerciseDetail:
        """Convert a joined database row to a TemplateExerciseDetail."""
        return TemplateExerciseDetail(
            id=row["id"],
            template_id=row["template_id"],
            exercise_id=row["exercise_id"],
            set_count=row["set_count"],
            target_reps=row["target_reps"],
            target_weight=row["target_weight"],
            order=row["order_index"],
            name=row["name"],
            muscle_group=row["muscleGroup"],
        )


_store: WorkoutStore | None = None


def get_store(db_path: Path | None = None) -> WorkoutStore:
    """Get the process-wide store, creating it on first use.

    `db_path` only has an effect on the call that creates the store.
    """
    global _store
    if _store is None:
        _store = WorkoutStore(db_path)
    return _store


async def close_store() -> None:
    """Close and forget the process-wide store."""
    global _store
    store, _store = _store, None
    if store is not None:
        await store.close()
