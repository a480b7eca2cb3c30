"""HTTP surface: FastAPI app and uvicorn runner."""
