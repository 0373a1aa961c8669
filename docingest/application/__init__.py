"""Application layer: ingestion orchestration, document management and event handling."""
