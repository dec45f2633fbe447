"""
Top-level package for the Scholaria API.

Scholaria stores researchers, subjects and findings (papers) and keeps
the cross references between them consistent.  All functionality lives
in submodules under ``app``.
"""

__version__ = "0.0.1"
