"""Infrastructure: persistence, object storage, cache, security and workers."""
