"""Device bezel compositing."""
