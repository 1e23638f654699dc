"""
Database package for skue.

Currently provides MongoDB persistence: a shared connection handle and a
per-collection persistor implementing ``DatabasePersistor`` with cache-aside
reads and writes.
"""

from .mongodb import MongoCollectionPersistor, MongoDBPersistor

__all__ = ["MongoDBPersistor", "MongoCollectionPersistor"]
