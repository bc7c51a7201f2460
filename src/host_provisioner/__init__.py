"""Idempotent, declarative provisioning for single hosts."""

__version__ = "0.1.0"
