"""Read-only reports over the host database."""
