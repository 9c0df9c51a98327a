"""Allow ``python -m swarmmon``."""

from swarmmon.cli import app

app()
