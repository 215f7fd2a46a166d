"""
Command-line entry points.

- pgblog-migrate: apply Alembic migrations up to head
- pgblog-seed:    insert a small demo data set
"""
