"""Domain core: exceptions and ingestion lifecycle rules."""
