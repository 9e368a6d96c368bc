"""Domain records and pure helpers (no persistence, no I/O)."""
