"""Upstream registry clients.

- catalog.py: fetch and parse the list of announced toolchain versions
"""
