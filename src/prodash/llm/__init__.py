"""
Chat completion clients.

- client.py: OpenAI-compatible endpoint via the openai SDK
- offline.py: deterministic demo responder (no network)
"""
