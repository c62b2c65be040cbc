"""MIDI file export and import for parsed scores."""
