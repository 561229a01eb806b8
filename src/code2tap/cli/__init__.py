"""
code2tap Command-Line Interface
===============================

This package provides the command-line tools:

- **code2tap**: Build a TAP image with a BASIC loader from a binary
- **tapinfo**: List and validate TAP images

Each tool is implemented as a Click-based CLI application.
"""

__all__ = ["code2tap", "tapinfo"]
