"""SQLite database: schema and engine setup."""
