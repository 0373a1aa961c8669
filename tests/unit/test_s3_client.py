"""
Test suite for S3DocumentClient.

Uses a stubbed boto3 client; no AWS calls are made.

System role: Verification of document storage operations
"""

from unittest.mock import MagicMock

import pytest

from docingest.boundary.aws.s3_client import S3DocumentClient


@pytest.fixture
def boto_client() -> MagicMock:
    client = MagicMock()
    client.generate_presigned_url.return_value = "https://signed.example/key"
    return client


@pytest.fixture
def s3_client(boto_client: MagicMock) -> S3DocumentClient:
    return S3DocumentClient(bucket="docs-bucket", client=boto_client)


class TestS3DocumentClient:
    """Test suite for S3DocumentClient."""

    def test_build_key_keeps_extension(self) -> None:
        key = S3DocumentClient.build_key("u1", "Report.PDF")

        assert key.startswith("users/u1/documents/")
        assert key.endswith(".pdf")

    def test_upload_puts_object(self, s3_client: S3DocumentClient, boto_client: MagicMock) -> None:
        key = s3_client.upload("users/u1/documents/x.pdf", b"%PDF-1.4")

        assert key == "users/u1/documents/x.pdf"
        boto_client.put_object.assert_called_once_with(
            Bucket="docs-bucket",
            Key="users/u1/documents/x.pdf",
            Body=b"%PDF-1.4",
            ContentType="application/pdf",
        )

    def test_presigned_download_url(self, s3_client: S3DocumentClient, boto_client: MagicMock) -> None:
        url, expires_at = s3_client.generate_presigned_download_url("k", expires_in=300)

        assert url == "https://signed.example/key"
        assert expires_at is not None
        boto_client.generate_presigned_url.assert_called_once_with(
            ClientMethod="get_object",
            Params={"Bucket": "docs-bucket", "Key": "k"},
            ExpiresIn=300,
        )

    def test_delete(self, s3_client: S3DocumentClient, boto_client: MagicMock) -> None:
        s3_client.delete("k")

        boto_client.delete_object.assert_called_once_with(Bucket="docs-bucket", Key="k")
