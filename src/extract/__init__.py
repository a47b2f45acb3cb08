"""Read highlights and book metadata from a Kobo database."""
