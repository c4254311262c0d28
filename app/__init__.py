"""Memorial service: memorial lifecycle, upload grants and media garbage collection."""
