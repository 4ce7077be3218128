"""Integration tests for components working together over HTTP.

No mocks for core functionality: requests go through the real HttpClient and
httpx, served by the FastAPI app in fake_backend.py.

Coverage:
    - HttpClient status handling, headers and streaming
    - Generation over SSE, including error events and backend cancellation
    - Conversation, user and document repositories
"""
