"""Data model, selection state machine, playback clock, and the lab store."""
