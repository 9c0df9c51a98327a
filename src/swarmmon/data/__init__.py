"""Usage file ingestion."""
