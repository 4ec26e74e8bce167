"""Domain models and errors.

Why:
- Pure, strict data structures (Pydantic v2) and the error taxonomy.
- The domain knows nothing about Typer, Rich or Jinja2: only deployment concepts.
"""
