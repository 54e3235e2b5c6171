"""
Document storage package.

Responsibilities:
- Define the DocumentStore interface used by every handler.
- Provide a MongoDB implementation and an in-process one for tests and dev.
"""
