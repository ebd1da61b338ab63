"""Endpoint modules for the listing API."""
