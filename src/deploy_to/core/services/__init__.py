"""Services of the core: path handling, change-set scanning, templating, matching."""
