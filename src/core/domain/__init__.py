"""Domain models and entities.

Why:
- Pure, strict data structures (Pydantic v2) and enums live here.
- The domain knows nothing about subprocesses, the CLI or sleeping.
"""
