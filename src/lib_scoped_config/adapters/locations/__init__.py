"""Default-location probes."""
