"""Tests for lifespan management."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from fileupload.core.lifespan import BaseEvent, Lifespan, State, create_lifespan


# -----------------------------------------------------------------------------
# State Tests
# -----------------------------------------------------------------------------


class TestState:
    """Tests for the State class."""

    def test_state_set_and_get_attribute(self) -> None:
        state = State()
        state.temp_dir = Path("/tmp")
        assert state.temp_dir == Path("/tmp")

    def test_state_get_nonexistent_attribute_raises(self) -> None:
        state = State()
        with pytest.raises(AttributeError, match="State has no attribute 'missing'"):
            _ = state.missing

    def test_state_contains_and_get(self) -> None:
        state = State()
        state.foo = "bar"
        assert "foo" in state
        assert state.get("missing", "default") == "default"

    def test_state_clear(self, test_state: State) -> None:
        test_state.a = 1
        test_state.clear()
        assert "a" not in test_state


# -----------------------------------------------------------------------------
# Lifespan Tests
# -----------------------------------------------------------------------------


class TestLifespan:
    """Tests for Lifespan class."""

    def test_create_lifespan_returns_lifespan(self) -> None:
        assert isinstance(create_lifespan(MagicMock()), Lifespan)

    def test_has_shutdown(self) -> None:
        class NoShutdownEvent(BaseEvent[str]):
            name = "no_shutdown"

            async def startup(self) -> str:
                return "started"

        class WithShutdownEvent(NoShutdownEvent):
            async def shutdown(self, instance: str) -> None:
                pass

        assert not NoShutdownEvent.has_shutdown()
        assert WithShutdownEvent.has_shutdown()

    async def test_startup_runs_registered_instances_and_fills_state(self) -> None:
        mock_app = MagicMock()
        lifespan = Lifespan(mock_app)

        class PathEvent(BaseEvent[str]):
            name = "upload_path"

            def __init__(self, path: str) -> None:
                self.path = path

            async def startup(self) -> str:
                return self.path

        event = PathEvent("testupload")
        lifespan.register(event)
        await lifespan.startup()

        assert lifespan.state is not None
        assert lifespan.state.upload_path == "testupload"
        assert lifespan.events == [event]
        mock_app.inject_global.assert_called_once_with(state=lifespan.state)

    async def test_shutdown_reverse_order_and_clear(self) -> None:
        shutdown_called = []

        class EventA(BaseEvent[str]):
            name = "event_a"

            async def startup(self) -> str:
                return "a"

            async def shutdown(self, instance: str) -> None:
                shutdown_called.append(instance)

        class EventB(EventA):
            name = "event_b"

            async def startup(self) -> str:
                return "b"

        lifespan = Lifespan(MagicMock())
        lifespan.register(EventA()).register(EventB())

        await lifespan.startup()
        await lifespan.shutdown()

        assert shutdown_called == ["b", "a"]
        assert lifespan.state is not None and "event_a" not in lifespan.state

    async def test_shutdown_handles_no_state(self) -> None:
        await Lifespan(MagicMock()).shutdown()
