"""Pydantic request/response models and SQLAlchemy tables."""
