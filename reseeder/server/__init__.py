"""
Entry point for the reseed server.
"""

from reseeder.common.models import ReseedOptions

from .bootstrap import Bootstrapper


def start_server(options: ReseedOptions) -> None:
    """Bootstrap credentials and serve until the listener stops."""
    Bootstrapper().run(options)
