"""
Backend package for the school website CMS.

This package provides a FastAPI application with storage and database
abstractions for the admin-managed content of the school site: news,
banners, galleries, school profile pages and the contact inbox.
"""
