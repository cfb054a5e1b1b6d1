"""Domain layer: value objects, commands and ports."""
