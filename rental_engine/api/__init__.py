"""HTTP service exposing search and pricing quotes."""
