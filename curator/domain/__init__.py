"""Domain layer: entities, errors and pure synchronization rules."""
