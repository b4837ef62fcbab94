"""Database Package - declarative base shared by every proxied model."""
