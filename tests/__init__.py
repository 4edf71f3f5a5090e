"""Test package for the EduBot client.

Structure:
    - unit/: Components in isolation, remote service scripted via httpx.MockTransport
    - integration/: Whole client against an in-process FastAPI fake of the service

Leverages pytest with pytest-asyncio (auto mode) and pytest-check for soft assertions.
"""
