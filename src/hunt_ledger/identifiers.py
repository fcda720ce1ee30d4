"""Identifier parsing and validation helpers."""

from uuid import UUID

from hunt_ledger.errors import InvalidIdentifier, ValidationError

MIN_TEAMS = 1
MAX_TEAMS = 10


def parse_id(raw: str | UUID, label: str = "id") -> UUID:
    """Parse a record identifier, raising InvalidIdentifier when malformed."""
    if isinstance(raw, UUID):
        return raw
    try:
        return UUID(str(raw).strip())
    except ValueError as exc:
        message = f"The requested {label} is not a valid id: {raw!r}"
        raise InvalidIdentifier(message) from exc


def validate_blob_ref(blob_ref: str) -> str:
    """Ensure a blob reference is a plain file name inside the blob directory."""
    cleaned = blob_ref.strip()
    if (
        not cleaned
        or cleaned.startswith(".")
        or "/" in cleaned
        or "\\" in cleaned
        or "\x00" in cleaned
    ):
        raise InvalidIdentifier(f"Invalid photo reference: {blob_ref!r}")
    return cleaned


def validate_team_count(requested: int) -> int:
    """Check that a bulk team request lies within the allowed range."""
    if requested < MIN_TEAMS or requested > MAX_TEAMS:
        raise ValidationError(
            f"Invalid number of teams requested: {requested} "
            f"(must be between {MIN_TEAMS} and {MAX_TEAMS})"
        )
    return requested


def require_text(value: str | None, message: str) -> str:
    """Return stripped text or raise ValidationError when blank."""
    if value is None or not value.strip():
        raise ValidationError(message)
    return value.strip()
