"""SQLite persistence for resource state."""
