"""Service surfaces: FastAPI app, CLI and dev server."""
