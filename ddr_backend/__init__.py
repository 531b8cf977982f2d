"""
Backend package for the DDR campaign website.

This package provides a FastAPI application exposing CRUD endpoints over the
site's document collections, file uploads and the single-page-app fallback.
"""
