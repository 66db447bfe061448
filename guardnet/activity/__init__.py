"""Activity log and statistics storage."""
