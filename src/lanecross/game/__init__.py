"""Game rules: grid, entities, placement and the per-frame simulation."""
