"""SQLAlchemy (Core, async) persistence."""
