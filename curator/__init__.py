"""Curator: managed playlist synchronization for Spotify."""
