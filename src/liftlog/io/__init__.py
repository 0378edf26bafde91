"""State persistence and (de)serialization."""
