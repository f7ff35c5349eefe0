"""Object storage clients used by the catalog and migration jobs."""
