"""Email address parsing and validation.

Turns free-form recipient input (pasted lists, comma or semicolon separated,
one per line) into categorized addresses. Everything here is pure.
"""

import re
from enum import Enum
from functools import lru_cache

import tldextract
from email_validator import EmailNotValidError
from email_validator import validate_email as validate_rfc_email
from pydantic import BaseModel

MAX_INPUT_LENGTH = 10000

# Runs of whitespace (including tabs and newlines), commas and semicolons
_SEPARATORS = re.compile(r"[\s,;]+")


class EmailError(str, Enum):
    """Reason an address was rejected."""

    INVALID_FORMAT = "Invalid email format"
    INVALID_DOMAIN = "Invalid domain"
    INVALID_TLD = "Invalid TLD"


class InvalidEmail(BaseModel):
    """An address that failed validation."""

    email: str
    error: EmailError


class ParsedEmails(BaseModel):
    """Categorized result of parsing recipient input.

    ``valid``, ``invalid`` and ``duplicates`` are disjoint. ``original`` holds
    every non-empty token before deduplication.
    """

    valid: list[str] = []
    invalid: list[InvalidEmail] = []
    duplicates: list[str] = []
    original: list[str] = []
    input_error: str | None = None


@lru_cache(maxsize=1)
def valid_tlds() -> frozenset[str]:
    """Top-level domains from the bundled Public Suffix List snapshot.

    No network fetch and no disk cache: the snapshot shipped with
    tldextract is the canonical list.
    """
    extractor = tldextract.TLDExtract(suffix_list_urls=(), cache_dir=None)
    return frozenset(suffix.lower() for suffix in extractor.tlds if "." not in suffix)


def normalize_email(email: str) -> str:
    """Trim and lower-case an address for comparison and storage."""
    return email.strip().lower()


def validate_email(email: str) -> EmailError | None:
    """Validate a single address.

    Checks run in a fixed order and the first failure wins: separator,
    domain labels, TLD, then full RFC syntax.

    Args:
        email: Address to validate (not normalized)

    Returns:
        The failure reason, or None if the address is valid
    """
    parts = email.split("@")
    if len(parts) != 2:
        return EmailError.INVALID_FORMAT

    labels = parts[1].split(".")
    if len(labels) < 2 or not all(labels):
        return EmailError.INVALID_DOMAIN

    if labels[-1].lower() not in valid_tlds():
        return EmailError.INVALID_TLD

    try:
        validate_rfc_email(email, check_deliverability=False)
    except EmailNotValidError:
        return EmailError.INVALID_FORMAT

    return None


def parse_emails(text: str, max_length: int = MAX_INPUT_LENGTH) -> ParsedEmails:
    """Split, deduplicate and validate a block of recipient addresses.

    Args:
        text: Raw user input
        max_length: Inputs longer than this are rejected without parsing

    Returns:
        Parsed result; only ``input_error`` is set when the input is too long
    """
    if len(text) > max_length:
        return ParsedEmails(
            input_error=f"Input too long. Maximum {max_length} characters allowed."
        )

    original = [token for token in _SEPARATORS.split(text) if token]

    seen: set[str] = set()
    unique: list[str] = []
    duplicates: list[str] = []
    for token in original:
        key = token.lower()
        if key in seen:
            duplicates.append(token)
        else:
            seen.add(key)
            unique.append(token)

    valid: list[str] = []
    invalid: list[InvalidEmail] = []
    for token in unique:
        error = validate_email(token)
        if error is None:
            valid.append(token)
        else:
            invalid.append(InvalidEmail(email=token, error=error))

    return ParsedEmails(
        valid=valid, invalid=invalid, duplicates=duplicates, original=original
    )


def mask_email(email: str | None) -> str | None:
    """Mask the local part of an address for logging.

    ``john.doe@example.com`` becomes ``jo***oe@example.com``.
    """
    if not email:
        return email
    local, sep, domain = email.partition("@")
    if len(local) <= 4:
        masked = local[:1] + "***"
    else:
        masked = local[:2] + "***" + local[-2:]
    return f"{masked}{sep}{domain}"
