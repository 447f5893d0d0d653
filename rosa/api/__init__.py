"""HTTP transport: FastAPI app and routes."""
