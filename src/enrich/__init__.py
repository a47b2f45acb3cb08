"""Vocabulary enrichment: language detection and definitions."""
