"""Data store client and HTTP routes."""
