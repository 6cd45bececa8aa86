"""Runtime services: telemetry, settings, and idle scheduling."""
