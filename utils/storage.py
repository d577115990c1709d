import os
import time
import random
import logging
import tempfile

import boto3
from botocore.exceptions import ClientError

from utils.errors import NotFoundError

logger = logging.getLogger(__name__)


def make_filename(ext: str) -> str:
    # e.g. 1718000000000-482913377.png
    ts = int(time.time() * 1000)
    rand = random.randint(0, 10**9)
    return f"{ts}-{rand}{ext.lower()}"


def join_key(directory: str, filename: str) -> str:
    return f"{directory.strip('/')}/{filename}"


class LocalAssetStore:
    """Asset store on the local disk, keyed by paths relative to ``root``."""

    def __init__(self, root):
        self.root = os.path.abspath(root)

    def _resolve(self, key: str) -> str:
        full = os.path.abspath(os.path.join(self.root, key.lstrip("/")))
        if full != self.root and not full.startswith(self.root + os.sep):
            raise NotFoundError(f"Path outside asset root: {key}")
        return full

    def ensure_dirs(self, directories):
        for d in directories:
            os.makedirs(self._resolve(d), exist_ok=True)

    def list(self, directory):
        full = self._resolve(directory)
        if not os.path.isdir(full):
            return []
        # hidden names are in-flight temp files
        return sorted(
            name for name in os.listdir(full)
            if not name.startswith(".") and os.path.isfile(os.path.join(full, name))
        )

    def exists(self, key):
        try:
            return os.path.isfile(self._resolve(key))
        except NotFoundError:
            return False

    def read_bytes(self, key):
        full = self._resolve(key)
        if not os.path.isfile(full):
            raise NotFoundError(f"File not found: {key}")
        with open(full, "rb") as f:
            return f.read()

    def stat(self, key):
        full = self._resolve(key)
        if not os.path.isfile(full):
            raise NotFoundError(f"File not found: {key}")
        st = os.stat(full)
        return st.st_size, st.st_mtime

    def remove(self, key):
        full = self._resolve(key)
        if not os.path.isfile(full):
            raise NotFoundError(f"File not found: {key}")
        os.remove(full)
        logger.info("removed %s", key)

    def save(self, directory, data: bytes, ext: str) -> str:
        target_dir = self._resolve(directory)
        os.makedirs(target_dir, exist_ok=True)
        filename = make_filename(ext)

        # write under a hidden temp name, then rename into place
        fd, tmp_path = tempfile.mkstemp(prefix=".upload-", dir=target_dir)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_path, os.path.join(target_dir, filename))
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

        key = join_key(directory, filename)
        logger.info("stored %s (%d bytes)", key, len(data))
        return key


class S3AssetStore:
    """Same interface as ``LocalAssetStore``, backed by an S3 bucket."""

    def __init__(self, bucket, prefix="", region=None, client=None):
        if not bucket:
            raise ValueError("S3_BUCKET is required for the s3 storage backend")
        self.bucket = bucket
        self.prefix = prefix.strip("/") + "/" if prefix.strip("/") else ""
        self.s3 = client or boto3.client("s3", region_name=region)

    def _key(self, key):
        return self.prefix + key.lstrip("/")

    def ensure_dirs(self, directories):
        # S3 has no directories
        pass

    def list(self, directory):
        prefix = self._key(directory.strip("/") + "/")
        names = []
        kwargs = {"Bucket": self.bucket, "Prefix": prefix, "Delimiter": "/"}
        while True:
            resp = self.s3.list_objects_v2(**kwargs)
            for obj in resp.get("Contents", []):
                name = obj["Key"][len(prefix):]
                if name and not name.startswith("."):
                    names.append(name)
            if not resp.get("IsTruncated"):
                break
            kwargs["ContinuationToken"] = resp["NextContinuationToken"]
        return sorted(names)

    def _head(self, key):
        try:
            return self.s3.head_object(Bucket=self.bucket, Key=self._key(key))
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("404", "NoSuchKey", "NotFound"):
                return None
            raise

    def exists(self, key):
        return self._head(key) is not None

    def read_bytes(self, key):
        try:
            obj = self.s3.get_object(Bucket=self.bucket, Key=self._key(key))
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("404", "NoSuchKey"):
                raise NotFoundError(f"File not found: {key}")
            raise
        return obj["Body"].read()

    def stat(self, key):
        head = self._head(key)
        if head is None:
            raise NotFoundError(f"File not found: {key}")
        return head["ContentLength"], head["LastModified"].timestamp()

    def remove(self, key):
        if not self.exists(key):
            raise NotFoundError(f"File not found: {key}")
        self.s3.delete_object(Bucket=self.bucket, Key=self._key(key))
        logger.info("removed s3://%s/%s", self.bucket, self._key(key))

    def save(self, directory, data: bytes, ext: str) -> str:
        key = join_key(directory, make_filename(ext))
        # a single PUT is atomic: readers see the whole object or nothing
        self.s3.put_object(Bucket=self.bucket, Key=self._key(key), Body=data)
        logger.info("stored s3://%s/%s (%d bytes)", self.bucket, self._key(key), len(data))
        return key


def create_store(config):
    backend = config.get("STORAGE_BACKEND", "local")
    if backend == "s3":
        return S3AssetStore(
            config.get("S3_BUCKET"),
            prefix=config.get("S3_PREFIX", ""),
            region=config.get("AWS_REGION"),
        )
    if backend == "local":
        return LocalAssetStore(config["STORAGE_ROOT"])
    raise ValueError(f"Unknown STORAGE_BACKEND: {backend}")
