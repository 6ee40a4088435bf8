"""Host platform schema and collaborators."""
