"""Core runtime: page cursors, projection resolution, transcoding, config and logging."""
