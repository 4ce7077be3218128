"""Test package for the chat session client.

Structure:
    - unit/: Individual function and class tests
    - integration/: Client, repositories and services against a fake backend

Integration tests run the real HttpClient over an ASGI transport mounted on an
in-process FastAPI backend, so no network or external services are needed.
Leverages pytest with pytest-check for soft assertions.
"""
