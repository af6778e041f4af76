"""Email/handle validation."""

from pydantic import EmailStr, TypeAdapter, ValidationError

_EMAIL_ADAPTER = TypeAdapter(EmailStr)


def normalize_email(email: str) -> str:
    """Trim and lower-case an email for comparison and lookup."""
    return email.strip().lower()


def is_email_valid(email: str | None) -> bool:
    """Check that `email` is a syntactically well-formed address."""
    if not email:
        return False
    try:
        _EMAIL_ADAPTER.validate_python(email.strip())
    except ValidationError:
        return False
    return True
