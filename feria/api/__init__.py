"""HTTP API for the fair point-of-sale."""
