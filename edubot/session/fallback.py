"""Canned answers used when the service cannot produce a real one."""

import random
import re

GREETING_WORDS = frozenset({"hello", "hi", "hey"})
DOCUMENT_KEYWORDS = ("pdf", "document", "file")

GREETING_REPLY = (
    "Hello there! I'm EduBot, your intelligent assistant 🤖 I can help you analyze "
    "documents and answer your questions. How can I help you today? ✨"
)
DOCUMENT_REPLY = (
    "I can analyze PDF files using advanced RAG technology! Upload a PDF file and "
    "I'll be able to answer questions about its content with high accuracy 📄"
)
HOW_IT_WORKS_REPLY = (
    "I work by combining several smart technologies:\n\n"
    "• Document Processing: Extract and index content from PDFs\n"
    "• RAG System: Retrieve relevant information\n"
    "• Natural Language: Understand context and provide human-like responses\n"
    "• Memory: Maintain conversation history\n\n"
    "What would you like to know more about? 🤖"
)
GENERIC_REPLIES = (
    "Great question! In the real application, I'll search through your uploaded "
    "documents and my knowledge base to give you the most accurate answer possible 🎯",
    "Happy to help! With access to PDF files and advanced AI capabilities, I can "
    "provide detailed insights on this topic 📖",
    "Excellent question! I use advanced natural language processing to understand "
    "your queries and retrieve relevant information ✨",
)

_WORD = re.compile(r"[a-z0-9']+")


def synthesize_fallback(text: str, rng: random.Random | None = None) -> str:
    """Pick a canned reply for ``text``.

    Rules are checked in order: greeting words, document keywords, then
    "how does it work" phrasing. Anything else gets a random generic reply.

    Args:
        text: The user's question.
        rng: Random source for the generic pool (seeded in tests).

    Returns:
        A non-empty explanatory reply.
    """
    query = (text or "").lower()
    words = set(_WORD.findall(query))

    if words & GREETING_WORDS:
        return GREETING_REPLY
    if any(keyword in query for keyword in DOCUMENT_KEYWORDS):
        return DOCUMENT_REPLY
    if {"how", "work"} <= words or {"what", "do"} <= words:
        return HOW_IT_WORKS_REPLY
    return (rng or random).choice(GENERIC_REPLIES)
