"""FastAPI layer for Script Sentinel."""
