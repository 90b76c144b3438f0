"""Core engine: batch scheduling, retry, pacing and job control."""
