"""SQLAlchemy plumbing: engine factory, schema, custom types and migrations."""
