"""
Pydantic schema definitions for API payloads.

Request bodies are validated here before they reach the services; the
services trust what they are given.  Responses are plain dicts because
a missing record is answered with an empty object.
"""
