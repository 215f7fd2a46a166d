"""
Business Logic Services

Services coordinate several repositories inside one transaction.

Service Pattern:
================
    Caller → Service → Repository → Database

Available Services:
===================
- BlogService: atomic multi-table writes, savepoint-scoped optional steps
- merge_users: SERIALIZABLE reassignment of one user's content to another
"""

from pgblog.services.blog_service import BlogService, merge_users

__all__ = [
    "BlogService",
    "merge_users",
]
