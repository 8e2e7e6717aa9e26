"""
Core dashboard logic.

Components:
- models.py: entities (Task, Note, ChatMessage, Preferences) and their stored shapes
- entity_collections.py: ordered collections persisted to the local store
- filters.py: pure derived views (task filter, note search, tag draft)
- chat.py: chat send state machine on top of an LLMClient port
- session.py / preferences.py: auth stub, settings document, API credential
"""
