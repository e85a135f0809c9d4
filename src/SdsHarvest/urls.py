"""URL templating, deduplication and filename derivation for SDS documents.

Every document URL follows the DocContentSet key template::

    <base>(Matnr='<m>',Subid='<s>',Sbgvid='<l>',Laiso='<lang>',Vkorg='')/DocContentData/$value

Field values are percent-encoded as path components, so values made of
unreserved characters (``290031915``, ``SDS_FR``) appear unchanged while
quotes, commas and slashes cannot break the key syntax. The filename used on
disk is recovered from the URL alone, which keeps the exists-check stable
across runs.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from urllib.parse import quote

from SdsHarvest.api.exceptions import MalformedURLError
from SdsHarvest.api.types import Record
from SdsHarvest.config.models import DEFAULT_BASE_URL

__all__ = (
    "DOCUMENT_SUFFIX",
    "build_url",
    "build_urls",
    "dedupe",
    "filename_for_url",
)

LOGGER = logging.getLogger(__name__)

DOCUMENT_SUFFIX = ".pdf"

_URL_TEMPLATE = (
    "{base}(Matnr='{matnr}',Subid='{subid}',Sbgvid='{sbgvid}',Laiso='{laiso}',Vkorg='')"
    "/DocContentData/$value"
)
_KEY_PATTERN = re.compile(r"Matnr='(.*?)',Subid='(.*?)',Sbgvid='(.*?)',Laiso='(.*?)'")


def _encode(value: str) -> str:
    return quote(value, safe="")


def build_url(record: Record, base_url: str = DEFAULT_BASE_URL) -> str:
    """Return the DocContentSet URL for ``record``."""

    return _URL_TEMPLATE.format(
        base=base_url,
        matnr=_encode(record.material_number),
        subid=_encode(record.sub_id),
        sbgvid=_encode(record.storage_location),
        laiso=_encode(record.language),
    )


def build_urls(records: Iterable[Record], base_url: str = DEFAULT_BASE_URL) -> list[str]:
    """Template every record, preserving input order."""

    return [build_url(record, base_url) for record in records]


def dedupe(items: Sequence[str]) -> list[str]:
    """Remove duplicates while preserving the first occurrence order."""

    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        if item not in seen:
            result.append(item)
            seen.add(item)
    dropped = len(items) - len(result)
    if dropped:
        LOGGER.debug("Dropped %d duplicate URLs", dropped)
    return result


def filename_for_url(url: str) -> str:
    """Derive the lower-cased on-disk filename from a document URL.

    Example:
        ``...(Matnr='290031915',Subid='630000000001',Sbgvid='SDS_FR',Laiso='FR',Vkorg='')...``
        → ``290031915_630000000001_sds_fr_fr.pdf``

    Raises:
        MalformedURLError: If ``url`` does not carry the four key fields.
    """

    match = _KEY_PATTERN.search(url)
    if match is None:
        raise MalformedURLError(url)
    return ("_".join(match.groups()) + DOCUMENT_SUFFIX).lower()
