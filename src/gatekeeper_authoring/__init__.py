"""Authoring tools for OPA Gatekeeper constraint templates and constraints."""

__version__ = "0.1.0"
