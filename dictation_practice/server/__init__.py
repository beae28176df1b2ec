"""HTTP service package: FastAPI app and its Pydantic schemas."""
