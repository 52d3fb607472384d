"""
REST API for the record lookup service.

Serves records from the local SQLite database over HTTPS and redirects
plain HTTP traffic to the secure listener.
"""

__version__ = "1.0.0"
