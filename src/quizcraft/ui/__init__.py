"""Interactive front ends: a Textual app and a Rich console loop."""
