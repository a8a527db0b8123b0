"""Infrastructure layer: observability, port adapters and in-memory stubs."""
