"""
Vaporizer recommendation engine.

Responsibilities:
- Map structured quiz answers onto user preferences.
- Score and rank catalog items against those preferences with per-category
  explanations.
- Rank items for a free-text "vibe" query through an LLM collaborator.
"""
