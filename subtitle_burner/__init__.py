"""Subtitle Burner editing engine: cues, styles, animated captions, undo.

WHY: A subtitle editor has to let users move, split, merge and restyle
cues freely, undo any of it, and preview per-word caption animations in
sync with the video. This package is that engine, independent of the web
application, the video pipeline and the transcription service around it.

HOW: Four layers, each only importing the ones before it:
  core        immutable records and stateless engines (cues, styles,
              templates, animation, playback, render pre-flight)
  actions     invertible edit records and the bounded undo/redo history
  adapters    transcription words to initial cues
  serializer  project-state documents and .sbp project files

RULES:
- State is immutable; every edit returns a new ProjectState
- Bad editing input is normalized, not rejected; only the serializer
  raises, and only for documents of the wrong shape
- The library logs through the standard logging module and never
  configures handlers itself
"""

__version__ = "0.1.0"
