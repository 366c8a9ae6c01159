"""ORM models for the relational metadata store."""
