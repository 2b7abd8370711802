"""
inventory_kernel -- domain values, typed errors, logging and persistence.

The kernel is the lowest layer: it MUST NOT import inventory_engines,
inventory_config or inventory_services.
"""
