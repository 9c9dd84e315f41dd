"""Business rules over the repositories. Services commit their own unit of work."""
