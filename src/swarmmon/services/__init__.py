"""Metrics, aggregation and change detection services."""
