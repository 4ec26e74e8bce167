"""Core of deploy-to.

Why:
- Holds the domain models, settings and the services that decide what gets
  deployed, without knowing about the CLI or the filesystem layout of templates.
"""
