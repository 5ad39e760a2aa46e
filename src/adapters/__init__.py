"""Adapters to the outside world: the cypher-shell CLI and the filesystem."""
