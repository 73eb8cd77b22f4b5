"""Persistence layer: ORM models and async session handling."""
