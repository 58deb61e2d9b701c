"""Web dashboard -- FastAPI app, routes, templates and live updates."""
