"""Render book documents from templates."""
