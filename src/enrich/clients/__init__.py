"""Clients for definition services."""
