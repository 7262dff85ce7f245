"""Pay Run CLI."""
