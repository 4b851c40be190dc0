"""
Shared, cross-cutting code for the API.

`core/` holds small building blocks that every feature uses (DB wiring,
schema setup, settings, logging, error rendering, the outbound webhook).
Feature-specific SQL and business logic stay in the feature package
(e.g. `votes/`).
"""
