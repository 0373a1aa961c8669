"""AWS boundary: S3 document storage."""

from docingest.boundary.aws.s3_client import S3DocumentClient

__all__ = ["S3DocumentClient"]
