"""Adapter package for external I/O implementations.

Purpose:
    Concrete implementations of domain ports: the HTTP action transport,
    the local settings store and the in-memory action double.

Dependencies:
    ``requests`` for HTTP, ``pydantic`` for wire schemas and the standard
    filesystem APIs for settings.
"""
