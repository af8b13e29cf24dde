"""
Shared, cross-cutting code for the app.

`core/` holds small building blocks that every feature uses
(DB wiring, settings, logging, the upstream HTTP client, templates). Keep
feature-specific SQL and business logic in the feature package (e.g. `sync/`).
"""
