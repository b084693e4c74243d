"""
taginfo version information.

Kept free of other imports so that reading the version never pulls in the
rest of the package.
"""

from __future__ import annotations

__version__ = "0.3.0"
