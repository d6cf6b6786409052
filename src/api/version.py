"""Canonical API version constant.

Kept in its own module so routes and the application factory can share
it without importing each other.
"""

API_VERSION = "0.1.0"
