"""Core collection, embedding and retrieval services."""
