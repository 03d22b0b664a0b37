"""Pydantic request/response and value models."""
