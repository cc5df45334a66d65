#!/usr/bin/env python3
"""
============================================
PURPOSE: Download the countries / states / cities source snapshot
INPUT: Internet connection and target download directory
OUTPUT: countries.json, states.json and cities.json ready for geodata_processor.py
RUN IN: Terminal / Command Prompt
============================================

Source: countries-states-cities-database (ODbL-1.0)
"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional

import requests

from geodata_config import INPUT_DIR
from geodata_store import SOURCE_FILES

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# ============================================
# CONFIGURATION - MODIFY THESE AS NEEDED
# ============================================

# Raw file location of the upstream JSON exports
SOURCE_BASE_URL = "https://raw.githubusercontent.com/dr5hn/countries-states-cities-database/master/json"

# Retry settings
MAX_RETRIES = 3
RETRY_DELAY = 5

# cities.json is large; give it time
REQUEST_TIMEOUT = 300
CHUNK_SIZE = 1024 * 1024


def download_file(url: str, filepath: Path, description: str) -> bool:
    """
    Download a single file with retry logic.

    Streams into a .part file and renames it on success so an interrupted
    download never leaves a truncated snapshot behind.
    """
    partial = filepath.with_name(filepath.name + ".part")
    for attempt in range(MAX_RETRIES):
        try:
            logger.info(f"Downloading: {description}")
            response = requests.get(url, timeout=REQUEST_TIMEOUT, stream=True)
            response.raise_for_status()

            with open(partial, 'wb') as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    f.write(chunk)
            partial.replace(filepath)

            logger.info(f"✓ Saved: {filepath.name}")
            return True

        except requests.exceptions.RequestException as e:
            logger.warning(f"Download attempt {attempt + 1}/{MAX_RETRIES} failed: {e}")
            if attempt < MAX_RETRIES - 1:
                time.sleep(RETRY_DELAY)
            else:
                logger.error(f"✗ Failed to download: {description}")

    if partial.exists():
        partial.unlink()
    return False


def download_snapshot(target_dir: Path = INPUT_DIR, base_url: str = SOURCE_BASE_URL,
                      force: bool = False, files: Optional[List[str]] = None) -> Dict[str, List[str]]:
    """
    Fetch the source files into target_dir.

    Files already present are skipped unless force is set. Returns the
    names that succeeded, were skipped and failed.
    """
    target_dir = Path(target_dir)
    target_dir.mkdir(parents=True, exist_ok=True)

    result = {'success': [], 'skipped': [], 'failed': []}
    for name in files or SOURCE_FILES:
        filepath = target_dir / name
        if filepath.exists() and not force:
            logger.info(f"⊘ Skipping (exists): {name}")
            result['skipped'].append(name)
            continue

        url = f"{base_url.rstrip('/')}/{name}"
        if download_file(url, filepath, name):
            result['success'].append(name)
        else:
            result['failed'].append(name)

    return result


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Download the geo-data source snapshot")
    parser.add_argument("--output", type=Path, default=INPUT_DIR, help="Where to save the JSON files")
    parser.add_argument("--base-url", default=SOURCE_BASE_URL, help="Location of the upstream JSON exports")
    parser.add_argument("--force", action="store_true", help="Download even if the files already exist")
    args = parser.parse_args(argv)

    logger.info(f"Download directory: {args.output.absolute()}")
    result = download_snapshot(args.output, args.base_url, force=args.force)

    logger.info(f"Downloaded: {len(result['success'])}, skipped: {len(result['skipped'])}, "
                f"failed: {len(result['failed'])}")
    return 1 if result['failed'] else 0


if __name__ == "__main__":
    sys.exit(main())
