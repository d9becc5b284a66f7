"""Behavior tests for the attendance event processor."""

import asyncio
import random
from datetime import UTC, datetime, timedelta

import pytest

from vc_attendance.application.services import AttendanceEventProcessor
from vc_attendance.domain.errors import InvalidEvent, PersistenceFailure
from vc_attendance.domain.models import AttendanceState, EventType

T0 = datetime(2025, 3, 10, 12, 0, 0, tzinfo=UTC)


class FakeClock:
    """Controllable clock returning a fixed time until advanced."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class InMemorySnapshotRepository:
    """Snapshot repository keeping saved copies in memory."""

    def __init__(self, fail: bool = False) -> None:
        self.saved: list[AttendanceState] = []
        self.fail = fail

    def load(self) -> AttendanceState:
        return AttendanceState()

    def save(self, state: AttendanceState) -> None:
        if self.fail:
            raise PersistenceFailure("disk full")
        self.saved.append(state.copy())


class RecordingBroadcaster:
    """Broadcaster remembering every pushed state."""

    def __init__(self) -> None:
        self.states: list[AttendanceState] = []

    async def broadcast_state(self, state: AttendanceState) -> None:
        self.states.append(state.copy())


def make_processor(
    clock: FakeClock | None = None, repository: InMemorySnapshotRepository | None = None
) -> tuple[AttendanceEventProcessor, InMemorySnapshotRepository, RecordingBroadcaster]:
    """Create a processor over an empty state with in-memory collaborators."""
    repository = repository or InMemorySnapshotRepository()
    broadcaster = RecordingBroadcaster()
    processor = AttendanceEventProcessor(
        AttendanceState(), repository, broadcaster, clock=clock or FakeClock()
    )
    return processor, repository, broadcaster


class TestJoinAndLeave:
    """Tests for session bookkeeping."""

    @pytest.mark.asyncio
    async def test_when_user_joins_then_session_is_active(self) -> None:
        """Given a join, when processing, then the user is active since the server time."""
        processor, _, _ = make_processor()

        state = await processor.process("join", "alice", "Lounge")

        assert state.active["alice"].channel == "Lounge"
        assert state.active["alice"].joined_at == T0
        assert state.stats == {}

    @pytest.mark.asyncio
    async def test_when_user_leaves_then_duration_is_credited(self) -> None:
        """Given a join at t0 and leave at t0+300.7s, when processing, then 300 seconds are credited."""
        clock = FakeClock()
        processor, _, _ = make_processor(clock)

        await processor.process("join", "alice", "Lounge")
        clock.advance(300.7)
        state = await processor.process("leave", "alice", "Lounge")

        assert "alice" not in state.active
        assert state.stats == {"alice": 300}

    @pytest.mark.asyncio
    async def test_when_user_returns_then_stats_accumulate(self) -> None:
        """Given two sessions, when both close, then their durations add up."""
        clock = FakeClock()
        processor, _, _ = make_processor(clock)

        await processor.process("join", "alice", "Lounge")
        clock.advance(60)
        await processor.process("leave", "alice", "Lounge")
        clock.advance(1000)
        await processor.process("join", "alice", "Lounge")
        clock.advance(40)
        state = await processor.process("leave", "alice", "Lounge")

        assert state.stats == {"alice": 100}

    @pytest.mark.asyncio
    async def test_when_leave_has_no_session_then_stats_unchanged_but_recorded(self) -> None:
        """Given a leave without join, when processing, then it is recorded but credits nothing."""
        processor, _, _ = make_processor()

        state = await processor.process("leave", "bob", "Lounge")

        assert state.stats == {}
        assert state.active == {}
        assert [(e.type, e.user) for e in state.history] == [(EventType.LEAVE, "bob")]

    @pytest.mark.asyncio
    async def test_when_user_joins_twice_then_first_session_is_discarded(self) -> None:
        """Given a repeated join, when the user leaves, then only the latest session counts."""
        clock = FakeClock()
        processor, _, _ = make_processor(clock)

        await processor.process("join", "alice", "Lounge")
        clock.advance(100)
        await processor.process("join", "alice", "Lounge")
        clock.advance(30)
        state = await processor.process("leave", "alice", "Lounge")

        assert state.stats == {"alice": 30}

    @pytest.mark.asyncio
    async def test_when_clock_goes_backwards_then_stats_never_decrease(self) -> None:
        """Given a leave timestamp before the join, when processing, then nothing is subtracted."""
        clock = FakeClock()
        processor, _, _ = make_processor(clock)

        await processor.process("join", "alice", "Lounge")
        clock.advance(-10)
        state = await processor.process("leave", "alice", "Lounge")

        assert state.stats == {"alice": 0}
        assert "alice" not in state.active

    @pytest.mark.asyncio
    async def test_event_type_is_case_insensitive(self) -> None:
        """Given an upper-case type, when processing, then it is treated like its lower-case form."""
        processor, _, _ = make_processor()

        state = await processor.process("JOIN", "alice", "Lounge")

        assert "alice" in state.active

    @pytest.mark.asyncio
    async def test_when_channel_missing_then_defaults_to_vc(self) -> None:
        """Given no channel, when processing, then the event is recorded for channel 'VC'."""
        processor, _, _ = make_processor()

        state = await processor.process("join", "alice")

        assert state.history[0].channel == "VC"
        assert state.active["alice"].channel == "VC"


class TestHistory:
    """Tests for the bounded history log."""

    @pytest.mark.asyncio
    async def test_history_is_most_recent_first_with_server_time(self) -> None:
        """Given a join then a leave, when processing, then the leave is first with its timestamp."""
        clock = FakeClock()
        processor, _, _ = make_processor(clock)

        await processor.process("join", "alice", "Lounge")
        clock.advance(5)
        state = await processor.process("leave", "alice", "Lounge")

        assert [e.type for e in state.history] == [EventType.LEAVE, EventType.JOIN]
        assert state.history[0].time == T0 + timedelta(seconds=5)

    @pytest.mark.asyncio
    async def test_when_101_events_processed_then_oldest_is_evicted(self) -> None:
        """Given 101 events, when processing, then history holds 100 with the newest in front."""
        clock = FakeClock()
        processor, _, _ = make_processor(clock)

        for index in range(101):
            clock.advance(1)
            await processor.process("join", f"user{index}", "Lounge")

        history = processor.state.history
        assert len(history) == 100
        assert history[0].user == "user100"
        assert all(e.user != "user0" for e in history)


class TestInvariants:
    """Property-style tests over event sequences."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("seed", [1, 7, 42, 2025])
    async def test_active_matches_users_whose_latest_event_is_join(self, seed: int) -> None:
        """Given a random event sequence, when replayed, then active holds exactly the users last seen joining."""
        rng = random.Random(seed)
        clock = FakeClock()
        processor, _, _ = make_processor(clock)
        users = ["alice", "bob", "carol", "dave"]
        latest: dict[str, str] = {}
        previous_stats: dict[str, int] = {}

        for _ in range(250):
            clock.advance(rng.randint(0, 120))
            user = rng.choice(users)
            event_type = rng.choice(["join", "leave"])
            state = await processor.process(event_type, user, "Lounge")
            latest[user] = event_type

            assert len(state.history) <= 100
            for name, seconds in previous_stats.items():
                assert state.stats[name] >= seconds
            previous_stats = dict(state.stats)

        expected_active = {user for user, event_type in latest.items() if event_type == "join"}
        assert set(processor.state.active) == expected_active

    @pytest.mark.asyncio
    async def test_concurrent_events_are_serialized(self) -> None:
        """Given many concurrent submissions, when processed, then every event is recorded once."""
        processor, repository, broadcaster = make_processor()

        await asyncio.gather(
            *(processor.process("join", f"user{index}", "Lounge") for index in range(50))
        )

        assert len(processor.state.history) == 50
        assert len(processor.state.active) == 50
        assert len(repository.saved) == 50
        assert [len(s.history) for s in broadcaster.states] == list(range(1, 51))


class TestRejectedAndIgnoredEvents:
    """Tests for malformed and unknown input."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("user", [None, "", "   ", 42])
    async def test_when_user_missing_then_raises_invalid_event(self, user: object) -> None:
        """Given a missing or malformed user, when processing, then InvalidEvent is raised without side effects."""
        processor, repository, broadcaster = make_processor()

        with pytest.raises(InvalidEvent):
            await processor.process("join", user, "Lounge")  # type: ignore[arg-type]

        assert processor.state.history == []
        assert repository.saved == []
        assert broadcaster.states == []

    @pytest.mark.asyncio
    async def test_when_channel_is_not_a_string_then_raises_invalid_event(self) -> None:
        """Given a non-string channel, when processing, then InvalidEvent is raised."""
        processor, _, _ = make_processor()

        with pytest.raises(InvalidEvent):
            await processor.process("join", "alice", ["Lounge"])  # type: ignore[arg-type]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("event_type", ["move", None, ""])
    async def test_when_type_unknown_then_event_is_ignored(self, event_type: str | None) -> None:
        """Given an unknown type, when processing, then nothing is recorded, saved or broadcast."""
        processor, repository, broadcaster = make_processor()

        state = await processor.process(event_type, "alice", "Lounge")

        assert state.history == []
        assert state.active == {}
        assert repository.saved == []
        assert broadcaster.states == []


class TestSideEffects:
    """Tests for persistence and broadcast after mutations."""

    @pytest.mark.asyncio
    async def test_each_mutation_is_saved_and_broadcast(self) -> None:
        """Given two events, when processing, then the full state is saved and broadcast after each."""
        processor, repository, broadcaster = make_processor()

        await processor.process("join", "alice", "Lounge")
        await processor.process("leave", "alice", "Lounge")

        assert len(repository.saved) == 2
        assert len(broadcaster.states) == 2
        assert repository.saved[-1].history == processor.state.history
        assert broadcaster.states[0].active.keys() == {"alice"}
        assert broadcaster.states[1].active == {}

    @pytest.mark.asyncio
    async def test_when_persistence_fails_then_processing_continues(self) -> None:
        """Given a failing repository, when processing, then state is updated and still broadcast."""
        processor, _, broadcaster = make_processor(
            repository=InMemorySnapshotRepository(fail=True)
        )

        state = await processor.process("join", "alice", "Lounge")

        assert "alice" in state.active
        assert len(broadcaster.states) == 1

    @pytest.mark.asyncio
    async def test_flush_saves_current_state(self) -> None:
        """Given a processed event, when flushing, then the state is saved once more."""
        processor, repository, _ = make_processor()
        await processor.process("join", "alice", "Lounge")

        await processor.flush()

        assert len(repository.saved) == 2

    @pytest.mark.asyncio
    async def test_snapshot_is_a_copy(self) -> None:
        """Given a snapshot, when more events are processed, then the snapshot is unchanged."""
        processor, _, _ = make_processor()
        await processor.process("join", "alice", "Lounge")

        snapshot = processor.snapshot()
        await processor.process("join", "bob", "Lounge")

        assert len(snapshot.history) == 1
        assert set(snapshot.active) == {"alice"}
