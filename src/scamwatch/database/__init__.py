"""
Database package for Scamwatch.

Provides the record store for trainer profiles and scammer reports on top of
a single long-lived aiosqlite connection.

Public API:
    - database: Global Database instance
    - RecordStore: Trainer/scammer operations
"""
