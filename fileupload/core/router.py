"""Router with upload request injection, error mapping and response handling."""

import inspect
import uuid
from collections.abc import Callable
from functools import wraps
from typing import Any

import orjson
from asgi_correlation_id import correlation_id
from pydantic import BaseModel
from robyn import Request, Response, SubRouter, status_codes
from robyn.robyn import HttpMethod

from fileupload.core.exceptions import APIError
from fileupload.models.upload import UploadRequest

UPLOAD_ENDPOINTS: set[str] = set()
REQUEST_ID_HEADER = "x-request-id"
JSON_HEADERS = {"content-type": "application/json"}


def parse_endpoint_signature(sig: inspect.Signature) -> set[str]:
    """Return names of parameters annotated with UploadRequest."""
    return {name for name, param in sig.parameters.items() if param.annotation is UploadRequest}


def parse_request_uploads(
    upload_params: set[str],
    request: Request,
    kwargs: dict[str, Any],
) -> None:
    """Build an UploadRequest for each upload parameter."""
    for param_name in upload_params:
        kwargs[param_name] = UploadRequest.from_request(request)


def get_request_id(request: Request) -> str:
    """Use the client supplied X-Request-ID or generate one."""
    return request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex


def _jsonable(item: Any) -> Any:
    return item.model_dump(by_alias=True) if isinstance(item, BaseModel) else item


def json_response(payload: Any, status_code: int = status_codes.HTTP_200_OK) -> Response:
    """Serialize ``payload`` (models, lists of models, plain data) as a JSON response."""
    if isinstance(payload, list):
        payload = [_jsonable(item) for item in payload]
    return Response(
        status_code=status_code,
        headers=dict(JSON_HEADERS),
        description=orjson.dumps(_jsonable(payload)).decode(),
    )


def error_response(error: APIError) -> Response:
    """Convert an APIError into its JSON response."""
    return json_response(error.to_dict(), status_code=error.status_code)


def parse_response(result: Any) -> Response:
    """Convert handler result to Response."""
    match result:
        case Response():
            return result
        case BaseModel() | dict() | list():
            return json_response(result)
        case _:
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={},
                description=str(result),
            )


HTTP_METHODS = (
    HttpMethod.GET,
    HttpMethod.POST,
    HttpMethod.PUT,
    HttpMethod.DELETE,
    HttpMethod.PATCH,
    HttpMethod.HEAD,
    HttpMethod.OPTIONS,
    HttpMethod.TRACE,
    HttpMethod.CONNECT,
)


def _create_method_wrapper(original_method: Callable, router_prefix: str = "") -> Callable:
    @wraps(original_method)
    def method_wrapper(*args, **kwargs) -> Callable:
        endpoint = args[0] if args else kwargs.get("endpoint", "")
        decorator = original_method(*args, **kwargs)

        def handler_decorator(handler: Callable) -> Callable:
            sig = inspect.signature(handler)
            upload_params = parse_endpoint_signature(sig)
            has_request_param = "request" in sig.parameters

            if upload_params:
                full_path = f"{router_prefix}{endpoint}".replace("//", "/")
                UPLOAD_ENDPOINTS.add(full_path)

            @wraps(handler)
            async def wrapped_handler(request: Request, **h_kwargs):
                token = correlation_id.set(get_request_id(request))
                try:
                    parse_request_uploads(upload_params, request, h_kwargs)

                    # Pass request to handler only if it declared it
                    if has_request_param:
                        h_kwargs["request"] = request

                    try:
                        result = await handler(**h_kwargs)
                    except APIError as ex:
                        return error_response(ex)
                    return parse_response(result)
                finally:
                    correlation_id.reset(token)

            # Build signature: always include request for Robyn injection
            new_params = [inspect.Parameter("request", inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=Request)]
            for name, param in sig.parameters.items():
                if name == "request" or name in upload_params:
                    continue
                new_params.append(param)

            wrapped_handler.__signature__ = sig.replace(parameters=new_params)  # type: ignore[attr-defined]
            return decorator(wrapped_handler)

        return handler_decorator

    return method_wrapper


class Router(SubRouter):
    """SubRouter with upload request injection, APIError mapping and response handling."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._prefix = kwargs.get("prefix", "")
        self._wrap_methods()

    def _wrap_methods(self) -> None:
        """Wrap HTTP methods with parsing logic."""
        for method in HTTP_METHODS:
            method_name = str(method).split(".")[-1].lower()
            if hasattr(self, method_name):
                original_method = getattr(self, method_name)
                wrapped_method = _create_method_wrapper(original_method, self._prefix)
                setattr(self, method_name, wrapped_method)
