"""
Taste Test backend.

Photograph a menu, OCR it, and get the top picks back as a chat transcript.
"""

__version__ = "0.1.0"
