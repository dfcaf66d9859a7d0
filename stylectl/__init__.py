"""
stylectl - source style checker

Resolves a layered style configuration (defaults, named presets, a
project config file and command-line overrides), checks Python sources
against it and renders the violations through a pluggable reporter.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
