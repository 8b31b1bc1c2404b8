"""Electron stage preparation.

Turns a raw Electron runtime distribution into a branded application stage
directory ready for signing and installer generation.
"""

__version__ = "0.1.0"
