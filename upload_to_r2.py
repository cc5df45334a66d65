"""
Upload the generated API tree to a Cloudflare R2 bucket (S3-compatible).

Credentials come from the environment:
R2_ACCOUNT_ID, R2_ACCESS_KEY_ID, R2_SECRET_ACCESS_KEY and optionally R2_BUCKET.
"""

import argparse
import logging
import mimetypes
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional

import boto3

from geodata_config import OUTPUT_DIR

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

BUCKET_NAME = os.environ.get("R2_BUCKET", "geo-data-api")

# Key prefix inside the bucket, e.g. api/v1/countries.json
KEY_PREFIX = "api/v1"

# Generated files never change in place; a new run replaces them wholesale
CACHE_CONTROL = "public, max-age=86400"


def r2_client():
    account_id = os.environ["R2_ACCOUNT_ID"]
    return boto3.client(
        's3',
        endpoint_url=f'https://{account_id}.r2.cloudflarestorage.com',
        aws_access_key_id=os.environ["R2_ACCESS_KEY_ID"],
        aws_secret_access_key=os.environ["R2_SECRET_ACCESS_KEY"],
    )


def object_key(local_path: Path, root: Path, prefix: str = KEY_PREFIX) -> str:
    relative = local_path.relative_to(root).as_posix()
    return f"{prefix.strip('/')}/{relative}" if prefix.strip('/') else relative


def upload_directory(path: Path, bucket_name: str = BUCKET_NAME, prefix: str = KEY_PREFIX, s3=None) -> Dict[str, List[str]]:
    """Upload every file below path, keeping the folder structure under prefix."""
    path = Path(path)
    s3 = s3 or r2_client()
    result = {'uploaded': [], 'failed': []}

    logger.info(f"Uploading {path} to {bucket_name}/{prefix}...")

    for local_path in sorted(p for p in path.rglob('*') if p.is_file()):
        key = object_key(local_path, path, prefix)

        content_type, _ = mimetypes.guess_type(str(local_path))
        if content_type is None:
            content_type = 'application/octet-stream'

        logger.debug(f"Uploading {local_path} to {key} ({content_type})...")
        try:
            s3.upload_file(
                str(local_path),
                bucket_name,
                key,
                ExtraArgs={'ContentType': content_type, 'CacheControl': CACHE_CONTROL}
            )
            result['uploaded'].append(key)
        except Exception as e:
            logger.error(f"Failed to upload {local_path}: {e}")
            result['failed'].append(key)

    logger.info(f"Upload complete! {len(result['uploaded'])} uploaded, {len(result['failed'])} failed")
    return result


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Upload the generated API to R2")
    parser.add_argument("--source", type=Path, default=OUTPUT_DIR, help="Generated API folder")
    parser.add_argument("--bucket", default=BUCKET_NAME)
    parser.add_argument("--prefix", default=KEY_PREFIX)
    args = parser.parse_args(argv)

    if not args.source.exists():
        logger.error(f"Source folder not found: {args.source}")
        logger.info("Please run geodata_processor.py first!")
        return 1

    result = upload_directory(args.source, args.bucket, args.prefix)
    return 1 if result['failed'] else 0


if __name__ == "__main__":
    sys.exit(main())
