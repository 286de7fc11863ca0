"""
Pydantic models shared by the API and service layers.

- io: request bodies and query schemas for the REST API
"""
