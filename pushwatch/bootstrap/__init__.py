"""Bootstrap wiring: logging, event loop handling and router construction."""
