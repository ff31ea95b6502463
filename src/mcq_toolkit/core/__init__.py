"""Core models, schemas and serialization helpers."""
