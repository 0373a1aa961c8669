"""Boundary adapters: database, object storage and message broker."""
