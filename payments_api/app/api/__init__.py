"""
API package: shared dependencies plus one subpackage per API version.
"""
