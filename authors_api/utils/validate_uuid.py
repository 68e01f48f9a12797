import uuid


def validate_uuid(value: object) -> uuid.UUID:
    """
    Coerce a UUID, its string form or its 16 raw bytes into a UUID.
    Raises ValueError for anything else.
    """
    if isinstance(value, uuid.UUID):
        return value
    if isinstance(value, (bytes, bytearray)):
        if len(value) != 16:
            raise ValueError("invalid identifier: expected 16 bytes")
        return uuid.UUID(bytes=bytes(value))
    if isinstance(value, str):
        try:
            return uuid.UUID(value.strip())
        except ValueError:
            raise ValueError(f"invalid identifier: {value!r}") from None
    raise ValueError(f"invalid identifier type: {type(value).__name__}")
