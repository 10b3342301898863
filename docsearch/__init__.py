"""Search-and-navigate core for the Blok documentation site."""
