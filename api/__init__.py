"""Placement test HTTP API."""
