"""API v1 endpoint modules (thin routes over application use cases)."""
