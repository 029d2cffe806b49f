"""monoscope command line interface."""

from monoscope.cli.app import app, main

__all__ = ["app", "main"]
