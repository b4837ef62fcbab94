"""Services Layer - invocation, registration, boot and binding of proxied operations."""
