"""FastAPI application module for MovieRec.

Contains the application, route handlers and logging setup for serving
rating predictions from a persisted model.
"""
