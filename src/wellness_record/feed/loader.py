"""Person feed loading.

The person list comes from an HTTP(S) URL, a JSON file (a list, or an object
with a ``data`` list) or a CSV file with one row per person. Loading never
raises: a feed that cannot be fetched or parsed yields an empty person list
and a message for the user.
"""

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Union

import pandas as pd
import requests

from wellness_record.feed.normalizer import normalize_with_diagnostics
from wellness_record.logging_audit import log_audit_event
from wellness_record.models.person import CanonicalPerson
from wellness_record.utils.exceptions import FeedError


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10

# CSV column holding ';'-separated ABHA addresses
CSV_ADDRESS_COLUMN = "abha_addresses"
CSV_ADDRESS_SEPARATOR = ";"


@dataclass(frozen=True)
class FeedLoadResult:
    """Outcome of loading the person feed.

    Attributes:
        persons: Normalized persons in feed order
        message: Summary for the user (error description when loading failed)
        diagnostics: Normalization notes keyed by record index
        records: Raw records as read, in the same order as persons
    """

    persons: tuple[CanonicalPerson, ...] = ()
    message: str = ""
    diagnostics: dict[int, tuple[str, ...]] = field(default_factory=dict)
    records: tuple[dict[str, Any], ...] = ()

    @property
    def ok(self) -> bool:
        return bool(self.persons)


def is_url(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


def extract_records(payload: Any) -> list[Any]:
    """Unwrap the record list from a decoded feed payload.

    Raises:
        FeedError: If the payload is neither a list nor an object with a
            ``data`` list
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping):
        data = payload.get("data")
        if isinstance(data, list):
            return data
        if data is None:
            return []
    raise FeedError(
        "Feed must be a JSON list of persons or an object with a 'data' list"
    )


def fetch_url(url: str, timeout: int = DEFAULT_TIMEOUT) -> list[Any]:
    """Fetch the person list over HTTP.

    Raises:
        FeedError: On connection errors, HTTP error status or invalid JSON
    """
    logger.info(f"Fetching person feed from {url}")
    try:
        response = requests.get(url, timeout=timeout, headers={"Cache-Control": "no-store"})
        response.raise_for_status()
    except requests.RequestException as e:
        raise FeedError(f"Failed to fetch {url}: {e}") from e
    try:
        payload = response.json()
    except ValueError as e:
        raise FeedError(f"Feed at {url} is not valid JSON: {e}") from e
    return extract_records(payload)


def read_json_file(path: Path) -> list[Any]:
    logger.info(f"Loading person feed from {path}")
    try:
        with open(path, encoding="utf-8") as f:
            payload = json.load(f)
    except json.JSONDecodeError as e:
        raise FeedError(f"Invalid JSON in {path}: {e.msg} at line {e.lineno}") from e
    except UnicodeDecodeError as e:
        raise FeedError(f"Feed file {path} is not valid UTF-8: {e}") from e
    except OSError as e:
        raise FeedError(f"Failed to read {path}: {e}") from e
    return extract_records(payload)


def _csv_row_to_record(row: Mapping[str, Any]) -> dict[str, Any]:
    record = {key: value for key, value in row.items() if value != ""}
    addresses = record.pop(CSV_ADDRESS_COLUMN, None)
    if addresses:
        record["additional_attributes"] = {
            "abha_addresses": [
                address.strip()
                for address in str(addresses).split(CSV_ADDRESS_SEPARATOR)
                if address.strip()
            ]
        }
    return record


def read_csv_file(path: Path) -> list[dict[str, Any]]:
    """Read persons from a CSV file, one row per person.

    Every column is read as text; empty cells are left out of the record so
    the normalizer treats them as missing.

    Raises:
        FeedError: If the file is missing or is not valid CSV
    """
    logger.info(f"Loading person feed from {path}")
    if not path.exists():
        raise FeedError(f"CSV file not found: {path}")
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8")
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise FeedError(
            f"Failed to read CSV file {path}. Ensure file is valid CSV with UTF-8 encoding. Error: {e}"
        ) from e
    except OSError as e:
        raise FeedError(f"Failed to read {path}: {e}") from e
    return [_csv_row_to_record(row) for row in df.to_dict(orient="records")]


def read_feed_records(source: Union[str, Path], timeout: int = DEFAULT_TIMEOUT) -> list[Any]:
    """Read raw records from a URL, JSON file or CSV file.

    Args:
        source: URL or file path
        timeout: HTTP timeout in seconds

    Returns:
        Raw records as decoded from the source

    Raises:
        FeedError: If the source cannot be read or decoded
    """
    source_text = str(source)
    if is_url(source_text):
        return fetch_url(source_text, timeout)
    path = Path(source_text)
    if path.suffix.lower() == ".csv":
        return read_csv_file(path)
    return read_json_file(path)


def load_feed(source: Union[str, Path], timeout: int = DEFAULT_TIMEOUT) -> FeedLoadResult:
    """Load and normalize the person feed.

    Args:
        source: URL, JSON file or CSV file
        timeout: HTTP timeout in seconds

    Returns:
        FeedLoadResult; on failure its person list is empty and its message
        says what went wrong
    """
    start_time = time.time()
    try:
        raw_records = read_feed_records(source, timeout)
    except FeedError as e:
        logger.error(str(e))
        log_audit_event(
            "FEED_LOADED",
            {"status": "failure", "source": str(source), "error_message": str(e)},
        )
        return FeedLoadResult(message=f"Failed to load persons from {source}: {e}")

    persons = []
    records = []
    diagnostics: dict[int, tuple[str, ...]] = {}
    for index, raw in enumerate(raw_records):
        if not isinstance(raw, Mapping):
            logger.warning(f"Skipping feed item {index}: expected an object, got {type(raw).__name__}")
            continue
        result = normalize_with_diagnostics(raw)
        position = len(persons)
        if result.diagnostics:
            diagnostics[position] = result.diagnostics
            for note in result.diagnostics:
                logger.warning(f"Person {position}: {note}")
        persons.append(result.person)
        records.append(dict(raw))

    skipped = len(raw_records) - len(persons)
    message = f"Loaded {len(persons)} person(s) from {source}"
    if skipped:
        message += f" ({skipped} invalid item(s) skipped)"

    log_audit_event(
        "FEED_LOADED",
        {
            "status": "success",
            "source": str(source),
            "record_count": len(persons),
            "duration": time.time() - start_time,
        },
    )
    return FeedLoadResult(
        persons=tuple(persons),
        message=message,
        diagnostics=diagnostics,
        records=tuple(records),
    )
