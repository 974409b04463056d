"""Host runtime, services and diagnostics."""
