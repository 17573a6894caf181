"""Core data model and error taxonomy."""
