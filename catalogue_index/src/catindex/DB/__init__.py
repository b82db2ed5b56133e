"""Canonical store adapters and the ordered index structures."""
