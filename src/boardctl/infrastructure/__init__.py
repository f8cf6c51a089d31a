"""Infrastructure layer — the SQLite record store behind the host app."""
