"""
Tests for the workout session stepper.
"""

import asyncio

import pytest

from fittrack.client import PlayerState, WorkoutPlayer, WorkoutSessionError
from fittrack.core.catalog import default_catalog

START_MS = 1_710_489_600_000  # 2024-03-15T08:00:00Z


class FakeClock:
    def __init__(self, now_ms=START_MS):
        self.now_ms = now_ms

    def __call__(self):
        return self.now_ms

    def advance(self, seconds):
        self.now_ms += int(seconds * 1000)


class RecordingSink:
    def __init__(self, fail=False):
        self.entries = []
        self.fail = fail

    async def __call__(self, entry):
        if self.fail:
            raise ConnectionError("backend unreachable")
        self.entries.append(entry)
        return "u1:1"


class SlowSink(RecordingSink):
    """Yields to the loop, then holds every call until `release` is set."""

    def __init__(self):
        super().__init__()
        self.release = asyncio.Event()

    async def __call__(self, entry):
        await asyncio.sleep(0)
        await self.release.wait()
        return await super().__call__(entry)


@pytest.fixture
def workout():
    return default_catalog()[0]  # Full Body Strength, 4 exercises


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def player(sink, clock):
    return WorkoutPlayer(sink, clock=clock)


class TestWorkoutPlayer:
    """Tests for WorkoutPlayer."""

    def test_starts_idle(self, player):
        assert player.state is PlayerState.IDLE
        assert player.current_exercise is None

    def test_start(self, player, workout):
        player.start(workout)
        assert player.state is PlayerState.IN_PROGRESS
        assert player.index == 0
        assert player.started_at_ms == START_MS
        assert player.current_exercise["name"] == "Push-ups"

    @pytest.mark.asyncio
    async def test_advance_steps_through_exercises(self, player, workout, sink):
        player.start(workout)
        names = [player.current_exercise["name"]]
        for _ in range(3):
            assert await player.advance() is None
            names.append(player.current_exercise["name"])

        assert names == ["Push-ups", "Squats", "Plank", "Lunges"]
        assert player.is_last_exercise
        assert sink.entries == []

    @pytest.mark.asyncio
    async def test_completion_logs_once(self, player, workout, sink, clock):
        player.start(workout)
        for _ in range(3):
            await player.advance()
        clock.advance(29 * 60 + 59)

        entry = await player.advance()

        assert player.state is PlayerState.COMPLETED
        assert sink.entries == [entry]
        assert entry["workoutId"] == "1"
        assert entry["duration"] == 29  # floor of elapsed minutes
        assert entry["caloriesBurned"] == 250
        assert [e["name"] for e in entry["exercises"]] == ["Push-ups", "Squats", "Plank", "Lunges"]
        assert entry["date"].startswith("2024-03-15T08:29:59")

    @pytest.mark.asyncio
    async def test_advance_after_completion_fails(self, player, workout):
        player.start(workout)
        for _ in range(4):
            await player.advance()
        with pytest.raises(WorkoutSessionError):
            await player.advance()

    @pytest.mark.asyncio
    async def test_advance_when_idle_fails(self, player):
        with pytest.raises(WorkoutSessionError):
            await player.advance()

    def test_start_while_in_progress_is_rejected(self, player, workout):
        player.start(workout)
        with pytest.raises(WorkoutSessionError):
            player.start(default_catalog()[1])
        assert player.workout["id"] == "1"

    @pytest.mark.asyncio
    async def test_abandon_writes_nothing(self, player, workout, sink):
        player.start(workout)
        await player.advance()
        player.abandon()

        assert player.state is PlayerState.IDLE
        assert sink.entries == []
        player.start(default_catalog()[1])
        assert player.current_exercise["name"] == "Jumping Jacks"

    @pytest.mark.asyncio
    async def test_restart_after_completion(self, player, workout, sink):
        player.start(workout)
        for _ in range(4):
            await player.advance()

        player.start(workout)
        assert player.state is PlayerState.IN_PROGRESS
        assert player.index == 0
        assert player.last_entry is None

    @pytest.mark.asyncio
    async def test_single_exercise_workout(self, player, sink, clock):
        player.start({"id": "s", "caloriesEstimate": 40, "exercises": [{"name": "Plank", "duration": 60}]})
        clock.advance(61)
        entry = await player.advance()
        assert entry["duration"] == 1
        assert len(sink.entries) == 1

    @pytest.mark.asyncio
    async def test_failed_sink_keeps_session(self, workout, clock):
        player = WorkoutPlayer(RecordingSink(fail=True), clock=clock)
        player.start(workout)
        for _ in range(3):
            await player.advance()

        with pytest.raises(ConnectionError):
            await player.advance()
        assert player.state is PlayerState.IN_PROGRESS
        assert player.is_last_exercise

    @pytest.mark.asyncio
    async def test_overlapping_completion_logs_once(self, workout, clock):
        sink = SlowSink()
        player = WorkoutPlayer(sink, clock=clock)
        player.start({**workout, "exercises": workout["exercises"][:1]})

        first = asyncio.ensure_future(player.advance())
        await asyncio.sleep(0)
        with pytest.raises(WorkoutSessionError):
            await player.advance()

        sink.release.set()
        entry = await first
        assert sink.entries == [entry]
        assert player.state is PlayerState.COMPLETED

    @pytest.mark.asyncio
    async def test_double_tap_on_last_exercise(self, workout, clock):
        sink = SlowSink()
        sink.release.set()
        player = WorkoutPlayer(sink, clock=clock)
        player.start({**workout, "exercises": workout["exercises"][:1]})

        results = await asyncio.gather(player.advance(), player.advance(), return_exceptions=True)

        assert len(sink.entries) == 1
        assert sum(isinstance(r, WorkoutSessionError) for r in results) == 1

    @pytest.mark.asyncio
    async def test_abandon_while_completing_is_rejected(self, workout, clock):
        sink = SlowSink()
        player = WorkoutPlayer(sink, clock=clock)
        player.start({**workout, "exercises": workout["exercises"][:1]})

        pending = asyncio.ensure_future(player.advance())
        await asyncio.sleep(0)
        with pytest.raises(WorkoutSessionError):
            player.abandon()

        sink.release.set()
        await pending
        assert len(sink.entries) == 1

    @pytest.mark.asyncio
    async def test_retry_after_failed_completion(self, workout, clock):
        sink = RecordingSink(fail=True)
        player = WorkoutPlayer(sink, clock=clock)
        player.start({**workout, "exercises": workout["exercises"][:1]})

        with pytest.raises(ConnectionError):
            await player.advance()

        sink.fail = False
        entry = await player.advance()
        assert sink.entries == [entry]
        assert player.state is PlayerState.COMPLETED
