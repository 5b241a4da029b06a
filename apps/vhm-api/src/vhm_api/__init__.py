"""VHM REST API."""
