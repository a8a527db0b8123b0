"""Domain layer for pushwatch.

Value types, error taxonomy and pure domain services. Nothing here knows
about timers, transports or configuration files.
"""
