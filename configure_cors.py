"""
Allow browsers on any origin to GET the published API from the R2 bucket.
"""

import logging
import sys

from upload_to_r2 import BUCKET_NAME, r2_client

logger = logging.getLogger(__name__)

CORS_CONFIGURATION = {
    'CORSRules': [{
        'AllowedHeaders': ['*'],
        'AllowedMethods': ['GET', 'HEAD'],
        'AllowedOrigins': ['*'],
        'ExposeHeaders': ['ETag'],
        'MaxAgeSeconds': 3000
    }]
}


def set_cors(bucket_name: str = BUCKET_NAME, s3=None) -> bool:
    s3 = s3 or r2_client()
    logger.info(f"Setting CORS for bucket {bucket_name}...")
    try:
        s3.put_bucket_cors(Bucket=bucket_name, CORSConfiguration=CORS_CONFIGURATION)
    except Exception as e:
        logger.error(f"Error setting CORS: {e}")
        return False
    logger.info("CORS configuration set successfully.")
    return True


if __name__ == "__main__":
    sys.exit(0 if set_cors() else 1)
