def to_uppercase(value: str | None) -> str | None:
    """
    Converts a string to uppercase if it's not None.
    """
    if value is None:
        return None
    return value.strip().upper()


def to_lowercase(value: str | None) -> str | None:
    """
    Converts a string to lowercase if it's not None.
    """
    if value is None:
        return None
    return value.strip().lower()


def normalize_window_overrides(value: dict | None) -> dict[str, int]:
    """
    Lowercase entity names in a recency override mapping and reject negative windows.

    `{"Post": 120, " profile ": 30}` -> `{"post": 120, "profile": 30}`
    """
    if not value:
        return {}

    normalized: dict[str, int] = {}
    for entity, seconds in value.items():
        seconds = int(seconds)
        if seconds < 0:
            raise ValueError(f"Recency window for {entity!r} must not be negative")
        normalized[str(entity).strip().lower()] = seconds
    return normalized
