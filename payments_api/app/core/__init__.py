"""
Cross-cutting infrastructure: configuration, logging, persistence,
error handling and security.
"""
