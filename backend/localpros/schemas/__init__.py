"""Pydantic request/response schemas, one module per feature."""
