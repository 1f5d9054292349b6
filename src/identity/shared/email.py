"""Structural email address validation used by the request schemas."""


def normalize_email(email: str) -> str:
    """Addresses are stored and compared lowercased, so one mailbox is one account."""
    return email.strip().lower()


def validate_email_address(email: str) -> str:
    """Return the normalised address or raise ``ValueError``.

    Checks structure only: exactly one @, non-empty local and domain parts,
    a dotted domain, no consecutive dots, no whitespace or forbidden characters.
    """
    email = email.strip()

    if any(ch.isspace() for ch in email):
        raise ValueError("email address must not contain whitespace")

    if email.count("@") != 1:
        raise ValueError("email address must contain exactly one @")

    local_part, domain_part = email.split("@", 1)

    if not local_part or local_part.startswith(".") or local_part.endswith("."):
        raise ValueError("email address has an invalid local part")

    if not domain_part or domain_part.startswith(".") or domain_part.endswith(".") or "." not in domain_part:
        raise ValueError("email address has an invalid domain")

    for label in domain_part.split("."):
        if label.startswith("-") or label.endswith("-"):
            raise ValueError("email address has an invalid domain")

    if ".." in email:
        raise ValueError("email address must not contain consecutive dots")

    for forbidden in (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\"):
        if forbidden in email:
            raise ValueError(f"email address must not contain {forbidden!r}")

    return normalize_email(email)
