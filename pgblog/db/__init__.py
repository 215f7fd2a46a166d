"""
Database Module

This module provides database connectivity and session management.

Architecture Overview:
======================
┌─────────────────────────────────────────────────────────────────────────────┐
│                        DATABASE LAYER                                       │
├─────────────────────────────────────────────────────────────────────────────┤
│                                                                             │
│   Entry point (pgblog-seed, application code)                               │
│       │                                                                     │
│       │  init_db() once, then session_scope() / transaction()               │
│       ▼                                                                     │
│   ┌─────────────────────────────────────────────────────────────┐          │
│   │              AsyncSession (from session.py)                 │          │
│   │  - Auto-commit on success                                   │          │
│   │  - Auto-rollback on exception                               │          │
│   └─────────────────────────────────────────────────────────────┘          │
│       │                                                                     │
│       │  Passed to Repository / Service                                     │
│       ▼                                                                     │
│   ┌─────────────────────────────────────────────────────────────┐          │
│   │              PostgreSQL Database                            │          │
│   └─────────────────────────────────────────────────────────────┘          │
│                                                                             │
└─────────────────────────────────────────────────────────────────────────────┘
"""

from pgblog.db.session import (
    init_db,
    close_db,
    session_scope,
    transaction,
    get_engine,
    get_session_factory,
    create_engine,
    create_session_factory,
)

__all__ = [
    # Lifecycle
    "init_db",
    "close_db",
    # Scopes
    "session_scope",
    "transaction",
    # Handles
    "get_engine",
    "get_session_factory",
    "create_engine",
    "create_session_factory",
]
