"""Block-list storage."""
