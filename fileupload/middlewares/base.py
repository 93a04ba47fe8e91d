"""Base middleware architecture for Robyn applications."""

from abc import ABC, abstractmethod
from collections.abc import Callable

from robyn import Request, Response, Robyn

from fileupload.core.logger import LogIcon, logger


class BaseMiddleware(ABC):
    """Abstract base class for middlewares with before/after hooks.

    An empty ``endpoints`` set registers the hooks globally.
    """

    endpoints: frozenset[str] = frozenset()

    def __init__(self, endpoints: frozenset[str] | list[str] | None = None) -> None:
        if endpoints is not None:
            self.endpoints = frozenset(endpoints)

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        before_abstract = getattr(cls.before, "__isabstractmethod__", False)
        after_abstract = getattr(cls.after, "__isabstractmethod__", False)
        if before_abstract and after_abstract:
            raise TypeError(f"{cls.__name__} must implement at least one of before/after")

    @abstractmethod
    def before(self, request: Request) -> Request | Response:
        """Called before request handling. Return Request to continue or Response to short-circuit."""
        return request

    @abstractmethod
    def after(self, request: Request, response: Response) -> Response:
        """Called after request handling with the request that produced ``response``. Return modified Response."""
        return response

    @property
    def has_before(self) -> bool:
        return not getattr(type(self).before, "__isabstractmethod__", False)

    @property
    def has_after(self) -> bool:
        return not getattr(type(self).after, "__isabstractmethod__", False)


class MiddlewareHandler:
    """Manages middleware registration for a Robyn application."""

    def __init__(self, app: Robyn) -> None:
        self._app = app
        self._middlewares: list[BaseMiddleware] = []

    @property
    def middlewares(self) -> list[BaseMiddleware]:
        return self._middlewares

    def register(self, middleware: BaseMiddleware) -> "MiddlewareHandler":
        """Register a middleware instance. Returns self for chaining."""
        self._middlewares.append(middleware)
        self._apply_middleware(middleware)
        logger.info(f"Registered middleware: {middleware.__class__.__name__}", icon=LogIcon.ADAPTER)
        return self

    def _apply_middleware(self, middleware: BaseMiddleware) -> None:
        endpoints = middleware.endpoints or (None,)
        for endpoint in endpoints:
            if middleware.has_before:
                self._register_before(endpoint, middleware.before)
            if middleware.has_after:
                self._register_after(endpoint, middleware.after)

    def _register_before(self, endpoint: str | None, handler: Callable) -> None:
        @self._app.before_request(endpoint)
        async def before_wrapper(request: Request) -> Request | Response:
            return handler(request)

    def _register_after(self, endpoint: str | None, handler: Callable) -> None:
        @self._app.after_request(endpoint)
        def after_wrapper(request: Request, response: Response) -> Response:
            return handler(request, response)
