"""
RagBot - Prompt Templates & Fixed Replies
==========================================
Centralised prompt text for the RAG engine.  All prompts live here so
they can be versioned and reviewed independently of application logic.

Exports
-------
PERSONAS, CONTEXT_INSTRUCTION, GENERIC_ERROR_REPLY,
METHOD_NOT_ALLOWED_ERROR, EMBED_CONFIRMATION.
"""

# ══════════════════════════════════════════════════════════════════════
#  SYSTEM PERSONAS
# ══════════════════════════════════════════════════════════════════════
# Selected through ``settings.PERSONA``.  The retrieved context is always
# appended after ``CONTEXT_INSTRUCTION``.

PERSONAS: dict[str, str] = {
    "base": "You are an assistant for Base blockchain.",
    "agent": "You are an Agent AI, introduce yourself as Aryan AI Agentbot. Also tell about your features.",
}

CONTEXT_INSTRUCTION: str = " Use this context:\n\n"


# ══════════════════════════════════════════════════════════════════════
#  FIXED HTTP REPLIES
# ══════════════════════════════════════════════════════════════════════

GENERIC_ERROR_REPLY: str = "Server error."

METHOD_NOT_ALLOWED_ERROR: str = "Only POST allowed"

EMBED_CONFIRMATION: str = "Embeddings saved."
