"""Event names carried in the `pattern` header of broker messages."""

DOCUMENT_INGESTION = "document_ingestion"
DOCUMENT_STATUS_UPDATE = "document_status_update"
DOCUMENT_STATUS_UPDATE_DLQ = "document_status_update_dlq"
