"""Adapters: config files, state persistence and Jinja2 rendering."""
