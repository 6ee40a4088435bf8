"""Core wiring: configuration, database scopes, dependencies and routing."""
