"""Web API: FastAPI app, routes and schemas."""
