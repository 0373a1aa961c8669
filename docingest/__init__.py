"""Document ingestion status backend."""
