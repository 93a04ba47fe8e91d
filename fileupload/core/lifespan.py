"""Lifespan management with event-based startup checks."""

from abc import ABC, abstractmethod
from collections.abc import Callable, Coroutine
from typing import Any, Generic, TypeVar

from robyn import Robyn

from fileupload.core.logger import LogIcon, logger
from fileupload.core.settings import settings as st

AsyncHandler = Callable[[], Coroutine[Any, Any, None]]


class State:
    """Application state container filled by lifespan events."""

    __slots__ = ("_data",)

    def __init__(self) -> None:
        object.__setattr__(self, "_data", {})

    def __getattr__(self, name: str) -> Any:
        try:
            return self._data[name]
        except KeyError:
            raise AttributeError(f"State has no attribute '{name}'") from None

    def __setattr__(self, name: str, value: Any) -> None:
        self._data[name] = value

    def __contains__(self, name: str) -> bool:
        return name in self._data

    def __repr__(self) -> str:
        return f"State({self._data})"

    def get(self, name: str, default: Any = None) -> Any:
        return self._data.get(name, default)

    def clear(self) -> None:
        self._data.clear()


T = TypeVar("T")


class BaseEvent(ABC, Generic[T]):
    """Abstract base class for lifespan events."""

    name: str

    @abstractmethod
    async def startup(self) -> T:
        """Prepare the resource and return it for the shared state."""
        ...

    async def shutdown(self, instance: T) -> None:  # noqa: B027
        """Optional cleanup. Override if cleanup is needed."""

    @classmethod
    def has_shutdown(cls) -> bool:
        return cls.shutdown is not BaseEvent.shutdown


class Lifespan:
    """Runs registered events on startup and shutdown of a Robyn app."""

    def __init__(self, app: Robyn) -> None:
        self._app = app
        self._registered: list[BaseEvent[Any]] = []
        self._events: list[BaseEvent[Any]] = []
        self._state: State | None = None

    def register(self, event: BaseEvent[Any]) -> "Lifespan":
        """Register an event instance. Returns self for chaining."""
        self._registered.append(event)
        return self

    @property
    def state(self) -> State | None:
        return self._state

    @property
    def events(self) -> list[BaseEvent[Any]]:
        return self._events

    async def run_startup(self) -> None:
        logger.info("Starting application lifespan", icon=LogIcon.START, version=st.API_VERSION)
        self._state = State()

        for event in self._registered:
            logger.info(f"Starting event: {event.name}", icon=LogIcon.PROCESSING)
            setattr(self._state, event.name, await event.startup())
            logger.info(f"Event ready: {event.name}", icon=LogIcon.SUCCESS)
            self._events.append(event)

        self._app.inject_global(state=self._state)
        logger.info("App state ready", icon=LogIcon.COMPLETE)

    async def run_shutdown(self) -> None:
        if not self._state:
            logger.info("No state to cleanup", icon=LogIcon.WARNING)
            return

        for event in reversed(self._events):
            if event.has_shutdown() and event.name in self._state:
                logger.info(f"Shutting down: {event.name}", icon=LogIcon.PROCESSING)
                await event.shutdown(getattr(self._state, event.name))

        self._state.clear()
        logger.info("Cleanup complete", icon=LogIcon.COMPLETE)

    @property
    def startup(self) -> AsyncHandler:
        """Startup handler for ``Robyn.startup_handler``."""
        return self.run_startup

    @property
    def shutdown(self) -> AsyncHandler:
        """Shutdown handler for ``Robyn.shutdown_handler``."""
        return self.run_shutdown


def create_lifespan(app: Robyn) -> Lifespan:
    """Create lifespan manager for event registration."""
    return Lifespan(app)
