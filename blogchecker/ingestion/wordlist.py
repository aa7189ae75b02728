"""
Techword List Loader
====================

Reads the newline-delimited techword list from its configured location:

- ``s3://bucket/key`` via boto3 (host is the bucket, path is the key)
- ``file:///path`` or a plain filesystem path
"""

from pathlib import Path
from typing import Callable, List, Optional
from urllib.parse import unquote, urlsplit

from ..utils.logging import get_logger_for_component
from ..utils.exceptions import ErrorCode, WordListError


logger = get_logger_for_component("wordlist")


def parse_word_list(raw: bytes) -> List[str]:
    """Decode a word list and return one entry per non-blank line.

    Args:
        raw: UTF-8 bytes, one word per line (a leading BOM is ignored)

    Returns:
        Words in file order, surrounding whitespace removed
    """
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise WordListError(
            f"Word list is not valid UTF-8: {e}",
            error_code=ErrorCode.WORDLIST_INVALID,
        ) from e

    return [line.strip() for line in text.splitlines() if line.strip()]


def split_s3_location(location: str) -> tuple:
    """Split ``s3://bucket/key`` into (bucket, key)."""
    parsed = urlsplit(location)
    bucket = parsed.hostname
    key = parsed.path.lstrip("/")
    if not bucket or not key:
        raise WordListError(
            f"S3 location must name a bucket and a key: {location}",
            location=location,
            error_code=ErrorCode.WORDLIST_INVALID,
        )
    return bucket, key


def fetch_s3_object(location: str, client=None) -> bytes:
    """Read an object from S3.

    Args:
        location: ``s3://bucket/key``
        client: boto3 S3 client (default: a new client from the environment)

    Returns:
        Raw object bytes
    """
    import boto3
    from botocore.exceptions import BotoCoreError, ClientError

    bucket, key = split_s3_location(location)
    s3_client = client or boto3.client("s3")

    try:
        obj = s3_client.get_object(Bucket=bucket, Key=key)
        return obj["Body"].read()
    except (BotoCoreError, ClientError) as e:
        raise WordListError(
            f"Failed to read word list from S3: {e}", location=location
        ) from e


def read_local_file(location: str) -> bytes:
    """Read a word list from ``file://`` URL or plain path."""
    if location.startswith("file://"):
        path = Path(unquote(urlsplit(location).path))
    else:
        path = Path(location).expanduser()

    try:
        return path.read_bytes()
    except OSError as e:
        raise WordListError(
            f"Failed to read word list file {path}: {e}", location=location
        ) from e


def load_word_list(
    location: str,
    s3_fetcher: Optional[Callable[[str], bytes]] = None,
) -> List[str]:
    """Load the techword list from its configured location.

    Args:
        location: s3:// URL, file:// URL or filesystem path
        s3_fetcher: Override for S3 reads (default: boto3)

    Returns:
        Words in file order
    """
    if not location or not location.strip():
        raise WordListError(
            "Word list location is empty", error_code=ErrorCode.WORDLIST_INVALID
        )

    location = location.strip()
    scheme = urlsplit(location).scheme.lower()

    if scheme == "s3":
        raw = (s3_fetcher or fetch_s3_object)(location)
    elif scheme in ("", "file") or len(scheme) == 1:
        # Single-letter schemes are Windows drive letters
        raw = read_local_file(location)
    else:
        raise WordListError(
            f"Unsupported word list location scheme '{scheme}'",
            location=location,
            error_code=ErrorCode.WORDLIST_INVALID,
        )

    words = parse_word_list(raw)
    logger.info(f"Loaded {len(words)} techwords from {location}")
    return words
