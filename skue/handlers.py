"""
Generic handlers wiring HTTP verbs to a DatabasePersistor.

Each handler takes the view layer, the persistor of the resource type and
the request, and writes the response following the REST architectural
style: decode problems are the client's (400/415), a missing id is 404 and
anything else the persistor raises is a 500 carrying its message.
"""

from typing import Any, Optional

from fastapi import Request, Response

from shared.errors import (
    DecodeError,
    MethodNotAllowedError,
    NotAcceptableError,
    NotFoundError,
    SimpleMessage,
    SkueException,
    UnsupportedMediaTypeError,
)
from shared.logging import get_logger

from .interfaces import DatabasePersistor
from .views import ViewLayer, consume, produce, render

logger = get_logger("skue.handlers")

DEFAULT_LIST_LIMIT = 25
DEFAULT_LIST_MAX_LIMIT = 100


def respond(view: ViewLayer, request: Request, status_code: int, value: Any) -> Response:
    """Produce ``value``; a client that accepts nothing we produce gets a 406 envelope."""
    try:
        return produce(view, request, status_code, value)
    except NotAcceptableError as e:
        return render(view.producer, e.status_code, e.to_response())


def service_response(view: ViewLayer, request: Request, status_code: int, message: str) -> Response:
    return respond(view, request, status_code, SimpleMessage(Status=status_code, Message=message))


def _error_response(view: ViewLayer, request: Request, error: SkueException) -> Response:
    return service_response(view, request, error.status_code, error.message)


def not_found(view: ViewLayer, request: Request) -> Response:
    return _error_response(view, request, NotFoundError())


def not_allowed(view: ViewLayer, request: Request) -> Response:
    """405 for verbs that are not mapped on a registered route."""
    return _error_response(view, request, MethodNotAllowedError())


def _detail(error: Exception) -> str:
    if isinstance(error, SkueException):
        return error.message
    return str(error)


def _failure(view: ViewLayer, request: Request, action: str, error: Exception) -> Response:
    logger.error(action, path=request.url.path, error=_detail(error), error_type=type(error).__name__)
    return service_response(view, request, 500, f"{action}: {_detail(error)}")


async def create(view: ViewLayer, persistor: DatabasePersistor, request: Request) -> Response:
    """
    Save a resource decoded from the request body.

    201 with the created resource, 400/415 when the body cannot be read and
    500 when the persistor fails.
    """
    try:
        resource = await consume(view, request, persistor.model)
    except (DecodeError, UnsupportedMediaTypeError) as e:
        return _error_response(view, request, e)

    try:
        created = await persistor.create(resource)
    except Exception as e:
        return _failure(view, request, "Failed saving the item", e)

    return respond(view, request, 201, created)


async def read(view: ViewLayer, persistor: DatabasePersistor, resource_id: str, request: Request) -> Response:
    """200 with the resource, 404 when it does not exist."""
    try:
        resource = await persistor.fetch(resource_id)
    except NotFoundError:
        return not_found(view, request)
    except Exception as e:
        return _failure(view, request, "Failed reading the item", e)

    return respond(view, request, 200, resource)


async def update(view: ViewLayer, persistor: DatabasePersistor, resource_id: str, request: Request) -> Response:
    """
    Replace the resource addressed by ``resource_id`` with the request body.

    The id in the route wins over any id in the body. Answers with a status
    message rather than the resource.
    """
    try:
        resource = await consume(view, request, persistor.model, {persistor.model.id_alias(): resource_id})
    except (DecodeError, UnsupportedMediaTypeError) as e:
        return _error_response(view, request, e)

    try:
        await persistor.update(resource, resource_id)
    except NotFoundError:
        return not_found(view, request)
    except Exception as e:
        return _failure(view, request, "Failed updating the item", e)

    return service_response(view, request, 200, "Successfully updated")


async def delete(view: ViewLayer, persistor: DatabasePersistor, resource_id: str, request: Request) -> Response:
    """Delete a resource after checking it exists, so repeated deletes answer 404."""
    try:
        await persistor.fetch(resource_id)
    except NotFoundError:
        return not_found(view, request)
    except Exception as e:
        return _failure(view, request, "Failed retrieving the item", e)

    try:
        await persistor.remove(resource_id)
    except Exception as e:
        return _failure(view, request, "Failed deleting the item", e)

    return service_response(view, request, 200, "Successfully deleted")


def _query_int(request: Request, name: str, default: int) -> int:
    raw: Optional[str] = request.query_params.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise DecodeError(f"Invalid {name}: {raw}") from e


async def list_resources(
    view: ViewLayer,
    persistor: DatabasePersistor,
    request: Request,
    *,
    default_limit: int = DEFAULT_LIST_LIMIT,
    max_limit: int = DEFAULT_LIST_MAX_LIMIT,
) -> Response:
    """
    200 with up to ``limit`` resources starting at ``skip``.

    Both come from the query string; ``limit`` defaults to ``default_limit``
    and is capped at ``max_limit``.
    """
    try:
        limit = _query_int(request, "limit", default_limit)
        skip = _query_int(request, "skip", 0)
        if limit < 1:
            raise DecodeError(f"Invalid limit: {limit}")
        if skip < 0:
            raise DecodeError(f"Invalid skip: {skip}")
    except DecodeError as e:
        return _error_response(view, request, e)

    try:
        resources = await persistor.list(min(limit, max_limit), skip)
    except Exception as e:
        return _failure(view, request, "Error requesting the list", e)

    return respond(view, request, 200, resources)
