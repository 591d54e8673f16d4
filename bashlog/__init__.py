"""Bashlog - workspace registry and instrumented shell sessions for bash command logging.

Package entry point.  Exports the version string only; the CLI modules import
the core lazily.
"""

__version__ = "0.1.0"
