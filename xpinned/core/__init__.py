"""Request pipeline: retry -> pinned tweet query -> guest token -> transport."""
