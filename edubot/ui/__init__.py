"""NiceGUI interface - thin presentation layer over the session core.

Responsibilities:
    - Chat message display driven by the conversation log
    - PDF upload control with topic prompt
    - Document list with confirm-before-delete
    - Connection state of the current chat session

Contains no business logic. Every state change goes through the
SessionManager or a library coordinator.
"""
