"""Rule tables and pure helpers shared by the services."""
