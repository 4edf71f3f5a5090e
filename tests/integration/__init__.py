"""Integration tests for the client working against a fake remote service.

The fake is a real FastAPI app served in-process through httpx.ASGITransport,
so requests go through actual form/multipart encoding and status handling.
"""
