"""Service-level endpoints that belong to no domain app."""
