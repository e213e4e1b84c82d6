"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Expose a plain text-in/text-out completion call for the vibe recommender.
- Translate SDK failures into a single ``LLMServiceError``.
"""
