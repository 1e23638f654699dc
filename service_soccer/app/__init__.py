"""
Soccer Service package, the example application built on skue.

- app.main: service wiring, API key gate and resource routes.
- app.models: Player and Team resources.

Players are keyed by MongoDB ObjectIds, teams by a caller supplied TeamId.
Both are cached in Redis when a cache is configured.
"""
