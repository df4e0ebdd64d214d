"""
Formula Installer

Install a pinned, checksum-verified script described by a formula manifest.
"""

__version__ = "0.1.0"
__author__ = "Imranur Rahman"

from .cli import main

__all__ = ["main"]
