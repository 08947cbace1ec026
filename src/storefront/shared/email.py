"""EmailAddress value object for validated email addresses."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from storefront.domain import storefront

_FORBIDDEN = (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")


def normalize_email(value: str | None) -> str:
    """Emails are compared and stored trimmed and lowercased."""
    return (value or "").strip().lower()


@storefront.value_object
class EmailAddress:
    """A structurally valid email address.

    Exactly one @, non-empty local and domain parts, a dotted domain, no
    whitespace, no consecutive dots and none of the characters RFC 5322
    reserves for quoting.
    """

    address: String(required=True, max_length=254)

    @invariant.post
    def verify_email_address(self):
        email = self.address
        invalid = ValidationError({"email": [f"Invalid email address: {email!r}"]})

        if any(ch.isspace() for ch in email) or email.count("@") != 1:
            raise invalid

        local_part, domain_part = email.split("@", 1)

        if not local_part or local_part.startswith(".") or local_part.endswith("."):
            raise invalid

        if "." not in domain_part or domain_part.startswith(".") or domain_part.endswith("."):
            raise invalid

        if any(label.startswith("-") or label.endswith("-") for label in domain_part.split(".")):
            raise invalid

        if ".." in email or any(ch in email for ch in _FORBIDDEN):
            raise invalid


def validated_email(value: str | None) -> str:
    """Normalize and validate, returning the stored form."""
    return EmailAddress(address=normalize_email(value)).address
