"""Host environment lookups."""
