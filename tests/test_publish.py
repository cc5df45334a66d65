import pytest

import upload_to_r2
from configure_cors import CORS_CONFIGURATION, set_cors
from upload_to_r2 import object_key, upload_directory


class FakeS3:
    def __init__(self, fail_on=()):
        self.uploads = []
        self.cors = {}
        self.fail_on = set(fail_on)

    def upload_file(self, filename, bucket, key, ExtraArgs=None):
        if key in self.fail_on:
            raise RuntimeError("access denied")
        self.uploads.append((bucket, key, ExtraArgs))

    def put_bucket_cors(self, Bucket, CORSConfiguration):
        if Bucket in self.fail_on:
            raise RuntimeError("no such bucket")
        self.cors[Bucket] = CORSConfiguration


@pytest.fixture
def api_tree(tmp_path):
    root = tmp_path / "api"
    (root / "countries").mkdir(parents=True)
    (root / "countries.json").write_text("{}", encoding="utf-8")
    (root / "countries" / "af.json").write_text("{}", encoding="utf-8")
    (root / "README").write_text("x", encoding="utf-8")
    return root


def test_object_key(tmp_path):
    path = tmp_path / "cities" / "batch" / "batch-1-100.json"
    assert object_key(path, tmp_path, "api/v1/") == "api/v1/cities/batch/batch-1-100.json"
    assert object_key(path, tmp_path, "") == "cities/batch/batch-1-100.json"


def test_upload_directory_keeps_structure_and_types(api_tree):
    s3 = FakeS3()
    result = upload_directory(api_tree, "bucket", "api/v1", s3=s3)

    assert sorted(result["uploaded"]) == ["api/v1/README", "api/v1/countries.json", "api/v1/countries/af.json"]
    assert result["failed"] == []
    extra = {key: args for _, key, args in s3.uploads}
    assert extra["api/v1/countries.json"]["ContentType"] == "application/json"
    assert extra["api/v1/README"]["ContentType"] == "application/octet-stream"
    assert extra["api/v1/countries/af.json"]["CacheControl"] == upload_to_r2.CACHE_CONTROL


def test_upload_directory_reports_failures(api_tree):
    s3 = FakeS3(fail_on={"api/v1/countries/af.json"})
    result = upload_directory(api_tree, "bucket", "api/v1", s3=s3)
    assert result["failed"] == ["api/v1/countries/af.json"]
    assert len(result["uploaded"]) == 2


def test_upload_main_requires_source(tmp_path):
    assert upload_to_r2.main(["--source", str(tmp_path / "missing")]) == 1


def test_set_cors():
    s3 = FakeS3()
    assert set_cors("bucket", s3=s3)
    assert s3.cors["bucket"] == CORS_CONFIGURATION
    assert s3.cors["bucket"]["CORSRules"][0]["AllowedMethods"] == ["GET", "HEAD"]


def test_set_cors_failure():
    assert not set_cors("gone", s3=FakeS3(fail_on={"gone"}))
