from typing import Iterable

from dbadmin.core.errors import InvalidIdentifier

# MySQL caps table and column names at 64 characters
MAX_IDENTIFIER_LENGTH = 64
DELIMITER = "`"


def validate_identifier(name: str, kind: str = "identifier") -> str:
    """
    Check that a caller-supplied table or column name can be embedded in SQL text.

    Rejects empty names, names over 64 characters, names containing the
    backtick delimiter and names containing control characters.
    """
    if not name:
        raise InvalidIdentifier(f"Empty {kind} name")

    if len(name) > MAX_IDENTIFIER_LENGTH:
        raise InvalidIdentifier(
            f"{kind.capitalize()} name is longer than {MAX_IDENTIFIER_LENGTH} characters"
        )

    if DELIMITER in name:
        raise InvalidIdentifier(f"{kind.capitalize()} name may not contain '{DELIMITER}'")

    if any(ord(char) < 32 or ord(char) == 127 for char in name):
        raise InvalidIdentifier(f"{kind.capitalize()} name contains control characters")

    return name


def ensure_known(name: str, known: Iterable[str], kind: str = "table") -> str:
    """Validate ``name`` and require it to be one of the live catalog names."""
    validate_identifier(name, kind)
    if name not in set(known):
        raise InvalidIdentifier(f"Unknown {kind} '{name}'")
    return name


def quote_identifier(name: str) -> str:
    # Inner backticks are doubled, the MySQL and SQLite escape for quoted names
    return DELIMITER + name.replace(DELIMITER, DELIMITER * 2) + DELIMITER
