"""deploy-to: generate deployment scripts for files changed since the last deploy."""

__version__ = "0.1.0"
