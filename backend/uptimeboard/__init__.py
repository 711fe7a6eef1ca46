"""UptimeBoard - monitor definitions and alert-state model."""
