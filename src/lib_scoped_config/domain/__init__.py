"""Domain layer: scopes, entries, signatures, and the error taxonomy."""
