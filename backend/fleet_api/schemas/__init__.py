"""Pydantic request/response models defining the HTTP contract."""
