"""Clients for external services (Claude API, website fetching)."""
