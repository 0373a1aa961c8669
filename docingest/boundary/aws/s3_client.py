"""
S3 client for document bucket operations.

Stores uploaded PDFs, removes them on document deletion and hands out
short-lived presigned read URLs for the history view.

Dependencies: boto3
System role: API-level S3 operations for raw documents
"""

import uuid
from datetime import datetime, timedelta, timezone

import boto3


class S3DocumentClient:
    """S3 client for document bucket operations."""

    def __init__(self, bucket: str, region: str = "us-east-1", client=None) -> None:
        """
        Initialize S3 client for document bucket.

        Args:
            bucket: S3 bucket name for document storage
            region: AWS region for S3 bucket
            client: Pre-built boto3 S3 client (tests inject a stub)
        """
        self._bucket = bucket
        self._region = region
        self._s3_client = client or boto3.client("s3", region_name=region)

    @staticmethod
    def build_key(user_id: str, filename: str) -> str:
        """
        Build the object key for a user's upload.

        Args:
            user_id: Uploading user's ID
            filename: Original filename (only its extension is kept)

        Returns:
            str: Key of the form users/{user_id}/documents/{uuid}.{ext}
        """
        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "pdf"
        return f"users/{user_id}/documents/{uuid.uuid4()}.{ext}"

    def upload(self, s3_key: str, body: bytes, content_type: str = "application/pdf") -> str:
        """
        Upload raw bytes to the bucket.

        Args:
            s3_key: S3 object key (path in bucket)
            body: File content
            content_type: MIME type of the file

        Returns:
            str: The key the object was stored under

        Raises:
            ClientError: If the upload fails
        """
        self._s3_client.put_object(
            Bucket=self._bucket,
            Key=s3_key,
            Body=body,
            ContentType=content_type,
        )
        return s3_key

    def generate_presigned_download_url(
        self,
        s3_key: str,
        expires_in: int = 300,
    ) -> tuple[str, datetime]:
        """
        Generate presigned URL for downloading/viewing an S3 object.

        Args:
            s3_key: S3 object key (path in bucket)
            expires_in: URL expiry in seconds (default 5 minutes)

        Returns:
            tuple[str, datetime]: (presigned_url, expires_at)

        Raises:
            ClientError: If presigned URL generation fails
        """
        presigned_url = self._s3_client.generate_presigned_url(
            ClientMethod="get_object",
            Params={
                "Bucket": self._bucket,
                "Key": s3_key,
            },
            ExpiresIn=expires_in,
        )
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
        return presigned_url, expires_at

    def delete(self, s3_key: str) -> None:
        """
        Delete an object. Deleting a missing key is not an error in S3.

        Raises:
            ClientError: If the delete call fails
        """
        self._s3_client.delete_object(Bucket=self._bucket, Key=s3_key)
