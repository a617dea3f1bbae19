"""Tests for the workout store."""

import asyncio
import random
import sqlite3
from datetime import datetime, timedelta, timezone

import aiosqlite
import pytest

from liftlog.db import (
    ExerciseNotFoundError,
    NotFoundError,
    TemplateNotFoundError,
    WorkoutStore,
    close_store,
    get_store,
)
from liftlog.models import (
    Exercise,
    ExercisePatch,
    TemplateExercise,
    Workout,
    WorkoutExercise,
    WorkoutTemplate,
)


async def count_rows(store: WorkoutStore, table: str) -> int:
    rows = await store._fetch_all(f"SELECT COUNT(*) FROM {table}")
    return rows[0][0]


class TestInitialization:
    """Tests for lazy connection setup."""

    @pytest.mark.asyncio
    async def test_first_call_creates_database(self, store, temp_db_path):
        """Nothing is opened until the first operation."""
        assert not store.initialized
        assert not temp_db_path.exists()

        assert await store.get_exercises() == []

        assert store.initialized
        assert temp_db_path.exists()

    @pytest.mark.asyncio
    async def test_wal_mode_enabled(self, store, temp_db_path):
        """The database is switched to write-ahead logging."""
        await store.get_exercises()

        async with aiosqlite.connect(temp_db_path) as db:
            cursor = await db.execute("PRAGMA journal_mode")
            row = await cursor.fetchone()
        assert row[0] == "wal"

    @pytest.mark.asyncio
    async def test_concurrent_first_calls_open_once(self, store, monkeypatch):
        """Callers racing on first use share one initialization."""
        import liftlog.db.store as store_module

        real_open = store_module.open_db
        calls = []

        async def counting_open(path):
            calls.append(path)
            await asyncio.sleep(0.01)
            return await real_open(path)

        monkeypatch.setattr(store_module, "open_db", counting_open)

        results = await asyncio.gather(*(store.get_exercises() for _ in range(5)))

        assert len(calls) == 1
        assert results == [[]] * 5

    @pytest.mark.asyncio
    async def test_failed_initialization_can_retry(self, temp_db_path):
        """A failed open leaves the store uninitialized for a later retry."""
        missing_dir = temp_db_path.parent / "missing"
        store = WorkoutStore(missing_dir / "test.db")

        with pytest.raises(sqlite3.OperationalError):
            await store.get_exercises()
        assert not store.initialized

        missing_dir.mkdir()
        assert await store.get_exercises() == []
        assert store.initialized
        await store.close()

    @pytest.mark.asyncio
    async def test_reopen_keeps_data(self, temp_db_path):
        """Reopening an existing database is safe and keeps its rows."""
        async with WorkoutStore(temp_db_path) as first:
            exercise_id = await first.add_exercise("Squat", "Legs")

        async with WorkoutStore(temp_db_path) as second:
            exercise = await second.get_exercise(exercise_id)

        assert exercise == Exercise(id=exercise_id, name="Squat", muscle_group="Legs")

    @pytest.mark.asyncio
    async def test_close_then_reuse(self, store):
        """Closing resets the store; the next call reopens it."""
        await store.add_exercise("Squat", "Legs")
        await store.close()
        assert not store.initialized

        exercises = await store.get_exercises()
        assert [e.name for e in exercises] == ["Squat"]

    @pytest.mark.asyncio
    async def test_close_store_forgets_shared_store(self, temp_db_path):
        """close_store closes the shared store and the next get_store makes a new one."""
        await close_store()
        shared = get_store(temp_db_path)
        assert get_store() is shared
        await shared.add_exercise("Squat", "Legs")

        await close_store()

        assert not shared.initialized
        replacement = get_store(temp_db_path)
        assert replacement is not shared
        assert [e.name for e in await replacement.get_exercises()] == ["Squat"]
        await close_store()


class TestExercises:
    """Tests for exercise operations."""

    @pytest.mark.asyncio
    async def test_add_and_get(self, store):
        """An added exercise comes back with its fields and a fresh id."""
        first = await store.add_exercise("Bench Press", "Chest")
        second = await store.add_exercise("Deadlift", "Back")

        assert second > first
        exercise = await store.get_exercise(first)
        assert exercise == Exercise(id=first, name="Bench Press", muscle_group="Chest")

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, store):
        """Looking up a missing id is not an error."""
        assert await store.get_exercise(999) is None

    @pytest.mark.asyncio
    async def test_list_all(self, store):
        """All exercises are listed."""
        await store.add_exercise("Bench Press", "Chest")
        await store.add_exercise("Deadlift", "Back")

        names = {e.name for e in await store.get_exercises()}
        assert names == {"Bench Press", "Deadlift"}

    @pytest.mark.asyncio
    async def test_update_merges_patch(self, store):
        """Fields missing from the patch keep their value."""
        exercise_id = await store.add_exercise("Bench", "Chest")

        updated = await store.update_exercise(exercise_id, ExercisePatch(name="Bench Press"))

        assert updated == Exercise(id=exercise_id, name="Bench Press", muscle_group="Chest")
        assert await store.get_exercise(exercise_id) == updated

    @pytest.mark.asyncio
    async def test_update_missing_raises(self, store):
        """Updating a missing exercise raises a not-found error."""
        with pytest.raises(ExerciseNotFoundError) as exc_info:
            await store.update_exercise(42, ExercisePatch(name="Anything"))

        assert isinstance(exc_info.value, NotFoundError)
        assert exc_info.value.entity_id == 42

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, store):
        """Deleting the same exercise twice does not error."""
        exercise_id = await store.add_exercise("Bench Press", "Chest")

        await store.delete_exercise(exercise_id)
        await store.delete_exercise(exercise_id)

        assert await store.get_exercise(exercise_id) is None

    @pytest.mark.asyncio
    async def test_delete_cascades_to_join_rows(self, store, push_day):
        """Deleting an exercise removes its workout and template entries."""
        template_id, bench_id, ohp_id = push_day
        workout_id = await store.start_workout_from_template(template_id)

        await store.delete_exercise(bench_id)

        workout_entries = await store.get_workout_exercises(workout_id)
        template_slots = await store.get_template_exercises(template_id)
        assert [e.exercise_id for e in workout_entries] == [ohp_id]
        assert [s.exercise_id for s in template_slots] == [ohp_id]

        orphans = await store._fetch_all(
            """
            SELECT id FROM workout_exercises WHERE exercise_id = ?
            UNION ALL
            SELECT id FROM template_exercises WHERE exercise_id = ?
            """,
            (bench_id, bench_id),
        )
        assert orphans == []


class TestWorkouts:
    """Tests for workout and workout-exercise operations."""

    @pytest.mark.asyncio
    async def test_add_and_get(self, store):
        """A workout round-trips through the store."""
        workout = Workout(name="Leg Day", date="2024-03-01T18:00:00.000+00:00", duration=45)
        workout_id = await store.add_workout(workout)

        fetched = await store.get_workout(workout_id)
        assert fetched.id == workout_id
        assert (fetched.name, fetched.date, fetched.duration) == (
            "Leg Day",
            "2024-03-01T18:00:00.000+00:00",
            45,
        )
        assert await store.get_workout(workout_id + 1) is None

    @pytest.mark.asyncio
    async def test_history_is_most_recent_first(self, store):
        """Workouts are listed by date descending whatever the insert order."""
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        dates = [(base + timedelta(days=d)).isoformat() for d in range(8)]
        shuffled = dates[:]
        random.Random(7).shuffle(shuffled)

        for date in shuffled:
            await store.add_workout(Workout(name=f"Workout {date[:10]}", date=date))

        history = await store.get_workouts()
        assert [w.date for w in history] == sorted(dates, reverse=True)

    @pytest.mark.asyncio
    async def test_entries_are_joined_with_exercise(self, store):
        """Logged exercises carry the exercise's name and muscle group."""
        squat_id = await store.add_exercise("Squat", "Legs")
        workout_id = await store.add_workout(Workout(name="Leg Day", date="2024-03-01"))

        entry_id = await store.add_exercise_to_workout(
            WorkoutExercise(workout_id=workout_id, exercise_id=squat_id, sets=5, reps=5, weight=225)
        )

        (entry,) = await store.get_workout_exercises(workout_id)
        assert entry.id == entry_id
        assert (entry.sets, entry.reps, entry.weight) == (5, 5, 225)
        assert (entry.name, entry.muscle_group) == ("Squat", "Legs")
        assert entry.volume == 5 * 5 * 225

    @pytest.mark.asyncio
    async def test_entry_for_missing_exercise_rejected(self, store):
        """Foreign keys reject entries pointing at missing rows."""
        workout_id = await store.add_workout(Workout(name="Leg Day", date="2024-03-01"))

        with pytest.raises(sqlite3.IntegrityError):
            await store.add_exercise_to_workout(
                WorkoutExercise(workout_id=workout_id, exercise_id=999, sets=1, reps=1)
            )

        # The store is still usable after a rejected write
        assert await store.get_workout_exercises(workout_id) == []

    @pytest.mark.asyncio
    async def test_delete_cascades_to_entries(self, store):
        """Deleting a workout removes its logged exercises."""
        squat_id = await store.add_exercise("Squat", "Legs")
        workout_id = await store.log_workout(
            Workout(name="Leg Day", date="2024-03-01"),
            [WorkoutExercise(workout_id=0, exercise_id=squat_id, sets=5, reps=5, weight=225)],
        )
        assert await count_rows(store, "workout_exercises") == 1

        await store.delete_workout(workout_id)

        assert await store.get_workout(workout_id) is None
        assert await count_rows(store, "workout_exercises") == 0

    @pytest.mark.asyncio
    async def test_log_workout_is_all_or_nothing(self, store):
        """A bad entry rolls back the whole logged workout."""
        squat_id = await store.add_exercise("Squat", "Legs")

        with pytest.raises(sqlite3.IntegrityError):
            await store.log_workout(
                Workout(name="Leg Day", date="2024-03-01"),
                [
                    WorkoutExercise(workout_id=0, exercise_id=squat_id, sets=5, reps=5, weight=225),
                    WorkoutExercise(workout_id=0, exercise_id=999, sets=3, reps=8, weight=100),
                ],
            )

        assert await store.get_workouts() == []
        assert await count_rows(store, "workout_exercises") == 0


class TestTemplates:
    """Tests for template and template-exercise operations."""

    @pytest.mark.asyncio
    async def test_create_and_list(self, store):
        """Templates are created and listed."""
        template_id = await store.create_template(WorkoutTemplate(name="Pull Day"))

        assert await store.get_templates() == [WorkoutTemplate(id=template_id, name="Pull Day")]
        assert await store.get_template(template_id) == WorkoutTemplate(id=template_id, name="Pull Day")
        assert await store.get_template(template_id + 1) is None

    @pytest.mark.asyncio
    async def test_slots_returned_in_order(self, store):
        """Slots come back by ascending order whatever the insert order."""
        template_id = await store.create_template(WorkoutTemplate(name="Full Body"))
        names = ["Squat", "Bench Press", "Row", "Curl"]
        ids = [await store.add_exercise(name, "Any") for name in names]

        for order in [2, 0, 3, 1]:
            await store.add_exercise_to_template(
                TemplateExercise(
                    template_id=template_id,
                    exercise_id=ids[order],
                    set_count=3,
                    target_reps=10,
                    order=order,
                )
            )

        slots = await store.get_template_exercises(template_id)
        assert [s.order for s in slots] == [0, 1, 2, 3]
        assert [s.name for s in slots] == names

    @pytest.mark.asyncio
    async def test_create_with_exercises_numbers_slots(self, store, push_day):
        """Slots are numbered densely in the order given."""
        template_id, bench_id, ohp_id = push_day

        slots = await store.get_template_exercises(template_id)

        assert [(s.order, s.exercise_id) for s in slots] == [(0, bench_id), (1, ohp_id)]
        assert slots[0].target_weight == 135
        assert slots[1].target_weight is None
        assert slots[0].muscle_group == "Chest"

    @pytest.mark.asyncio
    async def test_gaps_are_not_renumbered(self, store):
        """Removing a slot leaves a gap in the order values."""
        ids = [await store.add_exercise(name, "Any") for name in ("A", "B", "C")]
        template_id = await store.create_template_with_exercises(
            WorkoutTemplate(name="ABC"),
            [TemplateExercise(template_id=0, exercise_id=i, set_count=1, target_reps=1) for i in ids],
        )

        await store.delete_exercise(ids[1])

        slots = await store.get_template_exercises(template_id)
        assert [(s.name, s.order) for s in slots] == [("A", 0), ("C", 2)]

    @pytest.mark.asyncio
    async def test_delete_cascades_to_slots(self, store, push_day):
        """Deleting a template removes its slots but not its exercises."""
        template_id, bench_id, _ = push_day

        await store.delete_template(template_id)

        assert await store.get_templates() == []
        assert await count_rows(store, "template_exercises") == 0
        assert await store.get_exercise(bench_id) is not None


class TestStartWorkoutFromTemplate:
    """Tests for materializing a template into a workout."""

    @pytest.mark.asyncio
    async def test_bench_press_scenario(self, store):
        """Targets carry over to the new workout's exercises."""
        exercise_id = await store.add_exercise("Bench Press", "Chest")
        template_id = await store.create_template(WorkoutTemplate(name="Push Day"))
        assert (exercise_id, template_id) == (1, 1)
        await store.add_exercise_to_template(
            TemplateExercise(
                template_id=1,
                exercise_id=1,
                set_count=3,
                target_reps=10,
                target_weight=135,
                order=0,
            )
        )

        workout_id = await store.start_workout_from_template(1)

        (entry,) = await store.get_workout_exercises(workout_id)
        assert (entry.sets, entry.reps, entry.weight) == (3, 10, 135)
        assert (entry.name, entry.muscle_group) == ("Bench Press", "Chest")

    @pytest.mark.asyncio
    async def test_unspecified_weight_becomes_zero(self, store):
        """A slot without a target weight starts at 0."""
        exercise_id = await store.add_exercise("Bench Press", "Chest")
        template_id = await store.create_template(WorkoutTemplate(name="Push Day"))
        await store.add_exercise_to_template(
            TemplateExercise(
                template_id=template_id,
                exercise_id=exercise_id,
                set_count=3,
                target_reps=10,
                target_weight=None,
                order=0,
            )
        )

        workout_id = await store.start_workout_from_template(template_id)

        (entry,) = await store.get_workout_exercises(workout_id)
        assert entry.weight == 0

    @pytest.mark.asyncio
    async def test_workout_fields(self, store, push_day):
        """The workout is named after the template, dated now, with no duration."""
        template_id, bench_id, ohp_id = push_day
        before = datetime.now(timezone.utc)

        workout_id = await store.start_workout_from_template(template_id)

        workout = await store.get_workout(workout_id)
        assert workout.name == "Push Day"
        assert workout.duration == 0
        started = workout.started_at()
        assert before - timedelta(seconds=1) <= started <= datetime.now(timezone.utc)

        entries = await store.get_workout_exercises(workout_id)
        assert sorted(e.exercise_id for e in entries) == sorted([bench_id, ohp_id])

    @pytest.mark.asyncio
    async def test_template_left_untouched(self, store, push_day):
        """Starting a workout does not change the template."""
        template_id, _, _ = push_day
        before = await store.get_template_exercises(template_id)

        await store.start_workout_from_template(template_id)
        await store.start_workout_from_template(template_id)

        assert await store.get_template_exercises(template_id) == before
        assert len(await store.get_workouts()) == 2

    @pytest.mark.asyncio
    async def test_missing_template(self, store):
        """A missing template raises and creates no workout."""
        with pytest.raises(TemplateNotFoundError):
            await store.start_workout_from_template(123)

        assert await store.get_workouts() == []

    @pytest.mark.asyncio
    async def test_failure_midway_leaves_no_workout(self, store, push_day, monkeypatch):
        """A failed entry insert rolls back the workout and earlier entries."""
        template_id, _, _ = push_day
        real_insert = store._insert_workout_exercise
        calls = 0

        async def flaky_insert(db, entry):
            nonlocal calls
            calls += 1
            if calls == 2:
                raise sqlite3.OperationalError("disk I/O error")
            return await real_insert(db, entry)

        monkeypatch.setattr(store, "_insert_workout_exercise", flaky_insert)

        with pytest.raises(sqlite3.OperationalError):
            await store.start_workout_from_template(template_id)

        assert await store.get_workouts() == []
        assert await count_rows(store, "workout_exercises") == 0

        monkeypatch.undo()
        workout_id = await store.start_workout_from_template(template_id)
        assert len(await store.get_workout_exercises(workout_id)) == 2

    @pytest.mark.asyncio
    async def test_readers_wait_for_rollback(self, store, push_day, monkeypatch):
        """A concurrent read never sees the rows of a start that rolls back."""
        template_id, _, _ = push_day
        inserting = asyncio.Event()

        async def failing_insert(db, entry):
            inserting.set()
            await asyncio.sleep(0.05)
            raise sqlite3.OperationalError("disk I/O error")

        monkeypatch.setattr(store, "_insert_workout_exercise", failing_insert)

        async def read_history():
            await inserting.wait()
            return await store.get_workouts()

        started, history = await asyncio.gather(
            store.start_workout_from_template(template_id),
            read_history(),
            return_exceptions=True,
        )

        assert isinstance(started, sqlite3.OperationalError)
        assert history == []

    @pytest.mark.asyncio
    async def test_delete_during_start_waits(self, store, push_day, monkeypatch):
        """Deleting the template mid-start cannot leave a half-built workout."""
        template_id, _, _ = push_day
        real_select = store._select_template
        looked_up = asyncio.Event()

        async def select_then_signal(db, template_id):
            template = await real_select(db, template_id)
            looked_up.set()
            await asyncio.sleep(0.05)
            return template

        monkeypatch.setattr(store, "_select_template", select_then_signal)

        async def delete_after_lookup():
            await looked_up.wait()
            await store.delete_template(template_id)

        workout_id, deleted = await asyncio.gather(
            store.start_workout_from_template(template_id),
            delete_after_lookup(),
            return_exceptions=True,
        )

        assert deleted is None
        assert len(await store.get_workout_exercises(workout_id)) == 2
        assert await count_rows(store, "workout_templates") == 0
        assert await count_rows(store, "template_exercises") == 0
