"""Domain services: declaration resolution and multi-value expansion."""
