"""Page storage and tag derivation."""
