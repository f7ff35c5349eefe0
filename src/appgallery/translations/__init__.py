"""Locale string tables shipped as JSON resources."""
