"""FastAPI integration helpers."""
