"""Schemas - pydantic models validating the proxy configuration surface."""
