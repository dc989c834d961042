"""Bridge Me: mood-aware streaming chat service."""
