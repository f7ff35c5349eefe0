"""One-shot data migration jobs run out-of-band from request handling."""
