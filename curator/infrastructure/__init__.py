"""Infrastructure adapters: Spotify connector, SQLAlchemy persistence and CLI."""
