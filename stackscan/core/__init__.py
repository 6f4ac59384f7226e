"""Core infrastructure: logging configuration."""
