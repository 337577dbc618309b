"""Application layer - search orchestration."""
