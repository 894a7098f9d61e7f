"""Allow ``python -m codecheck_launchpad``."""

from .cli.main import app

app()
