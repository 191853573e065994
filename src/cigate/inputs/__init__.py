"""Adapters for the external collaborators cigate reads from or drives."""
