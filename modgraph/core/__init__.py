"""Core data models for modgraph."""
