"""Application layer for pushwatch: ports and use-case services."""
