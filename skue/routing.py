"""
Route registration for CRUD resources.
"""

from typing import Union

from fastapi import APIRouter, FastAPI, Request, Response

from . import handlers
from .constants import HTTP_METHODS
from .interfaces import DatabasePersistor
from .views import ViewLayer

COLLECTION_METHODS = ("GET", "POST")
ITEM_METHODS = ("GET", "PUT", "DELETE")


def register_resource(
    app: Union[FastAPI, APIRouter],
    path: str,
    view: ViewLayer,
    persistor: DatabasePersistor,
    *,
    list_limit: int = handlers.DEFAULT_LIST_LIMIT,
    list_max_limit: int = handlers.DEFAULT_LIST_MAX_LIMIT,
) -> None:
    """
    Expose ``persistor`` under ``path``::

        POST   /<path>        create
        GET    /<path>        list (?limit=&skip=)
        GET    /<path>/{id}   read
        PUT    /<path>/{id}   update
        DELETE /<path>/{id}   delete

    Any other verb on either path answers 405.
    """
    path = path.rstrip("/")
    item_path = path + "/{resource_id}"
    name = path.strip("/").replace("/", "_") or "root"

    @app.post(path, name=f"create_{name}", response_class=Response)
    async def create_resource(request: Request):
        return await handlers.create(view, persistor, request)

    @app.get(path, name=f"list_{name}", response_class=Response)
    async def list_resources(request: Request):
        return await handlers.list_resources(
            view, persistor, request, default_limit=list_limit, max_limit=list_max_limit
        )

    @app.get(item_path, name=f"read_{name}", response_class=Response)
    async def read_resource(resource_id: str, request: Request):
        return await handlers.read(view, persistor, resource_id, request)

    @app.put(item_path, name=f"update_{name}", response_class=Response)
    async def update_resource(resource_id: str, request: Request):
        return await handlers.update(view, persistor, resource_id, request)

    @app.delete(item_path, name=f"delete_{name}", response_class=Response)
    async def delete_resource(resource_id: str, request: Request):
        return await handlers.delete(view, persistor, resource_id, request)

    async def method_not_allowed(request: Request):
        return handlers.not_allowed(view, request)

    app.add_api_route(
        path,
        method_not_allowed,
        methods=[m for m in HTTP_METHODS if m not in COLLECTION_METHODS],
        name=f"not_allowed_{name}",
        include_in_schema=False,
    )
    app.add_api_route(
        item_path,
        method_not_allowed,
        methods=[m for m in HTTP_METHODS if m not in ITEM_METHODS],
        name=f"not_allowed_{name}_item",
        include_in_schema=False,
    )
