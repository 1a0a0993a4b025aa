"""HTTP API - FastAPI application, routes and error handlers."""
