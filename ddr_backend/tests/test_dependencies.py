import unittest
from unittest.mock import patch

from ddr_backend import dependencies
from ddr_backend.config import Settings
from ddr_backend.db import InMemoryDocumentStore, SqlDocumentStore
from ddr_backend.storage import (
    InMemoryStorageClient,
    LocalStorageClient,
    S3StorageClient,
)


class DependencyWiringTests(unittest.TestCase):
    def setUp(self):
        dependencies._document_store = None
        dependencies._storage_client = None

    def tearDown(self):
        dependencies._document_store = None
        dependencies._storage_client = None

    def use_settings(self, **kwargs):
        kwargs.setdefault("use_in_memory_backends", False)
        patcher = patch(
            "ddr_backend.dependencies.get_settings", return_value=Settings(**kwargs)
        )
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_store_without_database_url_is_in_memory(self):
        self.use_settings(database_url=None)
        store = dependencies.get_document_store()
        self.assertIsInstance(store, InMemoryDocumentStore)
        self.assertIs(dependencies.get_document_store(), store)

    def test_store_with_database_url_is_sql(self):
        self.use_settings(database_url="sqlite+pysqlite:///:memory:")
        self.assertIsInstance(dependencies.get_document_store(), SqlDocumentStore)

    def test_in_memory_toggle_wins_over_database_url(self):
        self.use_settings(
            database_url="sqlite+pysqlite:///:memory:", use_in_memory_backends=True
        )
        self.assertIsInstance(dependencies.get_document_store(), InMemoryDocumentStore)

    def test_storage_without_bucket_is_local(self):
        self.use_settings(storage_bucket=None, upload_dir="media")
        storage = dependencies.get_storage_client()
        self.assertIsInstance(storage, LocalStorageClient)
        self.assertEqual(storage.directory, "media")
        self.assertEqual(storage.url_prefix, dependencies.UPLOADS_URL_PATH)

    @patch("ddr_backend.storage.boto3")
    def test_storage_with_bucket_is_remote(self, mock_boto3):
        self.use_settings(
            storage_bucket="site-media",
            storage_endpoint="https://s3.example.test",
            storage_access_key_id="key",
            storage_secret_access_key="secret",
        )
        storage = dependencies.get_storage_client()
        self.assertIsInstance(storage, S3StorageClient)
        self.assertEqual(storage.bucket, "site-media")
        self.assertEqual(storage.folder, "ddr_uploads")
        self.assertEqual(
            mock_boto3.client.call_args.kwargs["endpoint_url"], "https://s3.example.test"
        )

    def test_in_memory_toggle_for_storage(self):
        self.use_settings(storage_bucket="site-media", use_in_memory_backends=True)
        self.assertIsInstance(dependencies.get_storage_client(), InMemoryStorageClient)


if __name__ == "__main__":
    unittest.main()
