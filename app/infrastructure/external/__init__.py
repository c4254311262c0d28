"""External services (S3-compatible object storage)."""
