"""Unit tests for individual components in isolation.

Coverage:
    - client/: response classification and request shapes
    - session/: store transitions, fallback answers, history, session manager
    - library/: document list, upload and delete coordinators
    - config and models: validation rules

The remote service is replaced by a scripted httpx.MockTransport.
"""
