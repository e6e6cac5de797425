"""Sitebook: local job-site, crew and budget tracking.

Modules:
- config: load and validate configuration (JSON or YAML)
- domain: entities, record codec, key-value storage and the DataStore
- services: dashboard/budget rollups, demo data and image compression
- io: CSV import/export helpers
- cli: command-line interface entrypoints
"""

__all__ = [
    "config",
    "domain",
    "services",
    "io",
    "cli",
]
