"""Domain models and errors.

Pure data structures: the domain knows nothing about httpx or the CLI,
only requests, headers and outcomes.
"""
