"""Test doubles for device access."""
