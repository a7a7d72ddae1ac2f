"""Core data model and stateless engines.

WHY: The core package holds the parts of the editor with real invariants:
the immutable cue/style/state records, the cue interval algorithms, the
style sanitizer and templates, and the caption animation renderer. The
action layer and the adapters are built on top of it.

HOW: models.py defines the records, subtitle_engine.py edits cue
collections, style.py and templates.py validate styles, animation.py
renders animated captions, playback.py and validation.py serve the player
and the render worker.

RULES:
- Nothing in core mutates its inputs
- Nothing in core raises on bad editing input; it normalizes instead
- Core never imports from actions, adapters or serializer
"""
