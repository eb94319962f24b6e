"""
Shared Validators

Input sanitization helpers used by the security checks of the reception core.
"""

import re


class ValidationError(Exception):
    """Validation error with field information."""

    def __init__(self, message: str, field: str | None = None, code: str | None = None):
        self.message = message
        self.field = field
        self.code = code or "validation_error"
        super().__init__(message)


class InputSanitizer:
    """Detects script-injection and SQL-keyword payloads in free text."""

    SCRIPT_PATTERNS: dict[str, re.Pattern[str]] = {
        "script_tag": re.compile(r"<\s*/?\s*script\b", re.IGNORECASE),
        "javascript_uri": re.compile(r"javascript\s*:", re.IGNORECASE),
        "event_handler": re.compile(r"\bon(?:load|error|click|mouseover|focus)\s*=", re.IGNORECASE),
        "iframe_tag": re.compile(r"<\s*iframe\b", re.IGNORECASE),
    }

    SQL_PATTERNS: dict[str, re.Pattern[str]] = {
        "sql_drop": re.compile(r"\bdrop\s+(?:table|database)\b", re.IGNORECASE),
        "sql_delete": re.compile(r"\bdelete\s+from\b", re.IGNORECASE),
        "sql_insert": re.compile(r"\binsert\s+into\b", re.IGNORECASE),
        "sql_union": re.compile(r"\bunion\s+(?:all\s+)?select\b", re.IGNORECASE),
        "sql_tautology": re.compile(r"'\s*or\s+'?\d+'?\s*=\s*'?\d+", re.IGNORECASE),
        "sql_comment": re.compile(r"(?:--|;)\s*(?:drop|delete|shutdown|exec)\b", re.IGNORECASE),
        "sql_exec": re.compile(r"\bexec(?:ute)?\s+(?:xp_|sp_)\w+", re.IGNORECASE),
    }

    @classmethod
    def find_script_pattern(cls, value: str | None) -> str | None:
        """Return the name of the first script pattern found in value."""
        if not value:
            return None
        for name, pattern in cls.SCRIPT_PATTERNS.items():
            if pattern.search(value):
                return name
        return None

    @classmethod
    def find_sql_pattern(cls, value: str | None) -> str | None:
        """Return the name of the first SQL pattern found in value."""
        if not value:
            return None
        for name, pattern in cls.SQL_PATTERNS.items():
            if pattern.search(value):
                return name
        return None

    @classmethod
    def find_threat(cls, value: str | None) -> str | None:
        return cls.find_script_pattern(value) or cls.find_sql_pattern(value)

    @classmethod
    def validate(cls, value: str | None, field_name: str = "field") -> str | None:
        """Raise ValidationError when value carries a known injection payload."""
        threat = cls.find_threat(value)
        if threat:
            raise ValidationError(
                f"{field_name} contains potentially malicious content",
                field=field_name,
                code=threat,
            )
        return value

    @classmethod
    def is_safe(cls, value: str | None) -> bool:
        """Check if value is safe without raising."""
        try:
            cls.validate(value)
            return True
        except ValidationError:
            return False
