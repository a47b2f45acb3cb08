"""Sync Kobo highlights into one markdown document per book."""
