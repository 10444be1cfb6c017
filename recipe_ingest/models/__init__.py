"""Recipe data models."""
