"""Unit tests for individual components in isolation.

Ensures fast execution with minimal dependencies.

Coverage:
    - chat/: Session state, cancellation and SSE consumption
    - conversations/: Response normalization, filtering and recency ordering
    - client/: Configuration loading and validation
    - models/: Pydantic validation
    - main: Terminal turn handling and interrupts

Uses mocks for the transport and generation service. Leverages pytest-check
for multiple assertions per test.
"""
