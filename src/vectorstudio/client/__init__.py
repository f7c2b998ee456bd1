"""User-facing surfaces: Flask API and CLI."""
