"""
Test suite for the replay engine.

Focus areas:
- Board reconstruction purity
- Clock cancellation and timing
- Controller invariants and completion signalling
- Session registry and CLI
"""
