"""Product Service: catalog and stock management."""
