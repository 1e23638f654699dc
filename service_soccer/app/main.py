"""
Soccer service: a players and teams API built on skue.
"""

import secrets
from typing import Dict, Optional

from fastapi import Request

from shared.base_service import BaseService
from shared.config import ServiceConfig, get_config
from shared.errors import UnauthorizedError
from skue import handlers
from skue.cache import CacheAside, RedisCacher
from skue.constants import HEADER_API_KEY
from skue.database import MongoCollectionPersistor, MongoDBPersistor
from skue.interfaces import DatabasePersistor, MemoryCacher
from skue.routing import register_resource
from skue.views import new_json_view

from .models import Player, Team

SERVICE_NAME = "soccer"
# Unassigned by IANA
SERVICE_PORT = 3020

OPEN_PATHS = ("/health", "/metrics")


class SoccerService(BaseService):
    """Soccer service implementation."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        *,
        mongo: Optional[MongoDBPersistor] = None,
        cacher: Optional[MemoryCacher] = None,
        players: Optional[DatabasePersistor] = None,
        teams: Optional[DatabasePersistor] = None,
    ):
        super().__init__(SERVICE_NAME, SERVICE_PORT, config=config or get_config(SERVICE_NAME, SERVICE_PORT))

        # Consume JSON and produce JSON content
        self.view = new_json_view()

        self.mongo = mongo or MongoDBPersistor(
            self.config.mongo_address,
            self.config.mongo_username,
            self.config.mongo_password,
            self.config.mongo_database,
            timeout_ms=self.config.mongo_timeout_ms,
            metrics=self.metrics,
        )
        if cacher is None and self.config.cache_enabled:
            cacher = RedisCacher(self.config.redis_url, self.config.redis_password, self.config.cache_ttl)
        self.cacher = cacher

        cache = CacheAside(self.cacher, self.config.cache_ttl, metrics=self.metrics)
        self.players = players or MongoCollectionPersistor(self.mongo, Player, cache)
        self.teams = teams or MongoCollectionPersistor(self.mongo, Team, cache)

        self._setup_soccer_routes()

    def _setup_auth_middleware(self):
        """Gate every resource route behind the X-API-KEY header when a key is configured."""

        @self.app.middleware("http")
        async def require_api_key(request: Request, call_next):
            api_key = self.config.api_key
            if api_key and request.url.path not in OPEN_PATHS:
                supplied = request.headers.get(HEADER_API_KEY, "")
                if not secrets.compare_digest(supplied.encode(), api_key.encode()):
                    self.logger.warning("Rejected request without a valid API key", path=request.url.path)
                    return handlers.service_response(
                        self.view, request, UnauthorizedError.status_code, UnauthorizedError().message
                    )
            return await call_next(request)

    def _setup_soccer_routes(self):
        """Set up soccer resource routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": SERVICE_NAME,
                "message": "skue - Soccer Service",
                "version": "1.0.0",
                "resources": [Team.collection, Player.collection]
            }

        register_resource(
            self.app,
            f"/{Team.collection}",
            self.view,
            self.teams,
            list_limit=self.config.list_limit,
            list_max_limit=self.config.list_max_limit,
        )
        register_resource(
            self.app,
            f"/{Player.collection}",
            self.view,
            self.players,
            list_limit=self.config.list_limit,
            list_max_limit=self.config.list_max_limit,
        )

    async def _check_dependencies(self) -> Dict[str, str]:
        """Check soccer service dependencies."""
        dependencies = {"mongodb": "ok" if await self.mongo.health_check() else "error"}
        if isinstance(self.cacher, RedisCacher):
            dependencies["redis"] = "ok" if await self.cacher.health_check() else "error"
        return dependencies

    async def start(self):
        """Start soccer service components."""
        await self.mongo.start()
        await self.mongo.create_index(Team.collection, Team.id_field, unique=True)
        if isinstance(self.cacher, RedisCacher):
            await self.cacher.start()

        self.logger.info("Soccer service started", port=self.port)

    async def stop(self):
        """Stop soccer service components."""
        if isinstance(self.cacher, RedisCacher):
            await self.cacher.stop()
        await self.mongo.stop()

        self.logger.info("Soccer service stopped")


def create_app():
    """Create soccer service application."""
    service = SoccerService()
    return service.app


def main():
    service = SoccerService()
    service.run()


if __name__ == "__main__":
    main()
