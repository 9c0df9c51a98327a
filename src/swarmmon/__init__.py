"""Swarm Monitor — live dashboard for rate-limited API usage."""

__version__ = "0.1.0"
