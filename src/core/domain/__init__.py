"""Domain models and errors.

Pure data structures (Pydantic v2) and the fatal error taxonomy. The domain
knows nothing about HTTP clients, the CLI or the filesystem.
"""
