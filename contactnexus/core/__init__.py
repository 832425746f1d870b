"""Core infrastructure: storage, dependencies, logging and seed data."""
