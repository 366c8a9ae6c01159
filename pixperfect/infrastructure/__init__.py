"""Infrastructure adapters: relational database and blob storage backends."""
