"""EduBot client - conversational document Q&A against a remote RAG service.

Tracks a chat session against a stateful backend, recovers from session
expiry, and mirrors the user's uploaded PDF library locally.

Components:
    - client: HTTP access to the remote service and response classification
    - session: session lifecycle, conversation log, reconnect protocol
    - library: local document list with upload/delete coordination
    - models: Pydantic domain records and wire payloads
    - ui: NiceGUI page wiring the core to the browser
"""

__version__ = "0.1.0"
