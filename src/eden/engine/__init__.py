"""Game engine: topology, parsing, resolution, state and orchestration."""
