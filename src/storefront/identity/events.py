"""Domain events raised by the User aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="User")
class UserRegistered:
    __version__ = 1

    user_id: Identifier(required=True)
    name: String(required=True)
    email: String(required=True)
    registered_at: DateTime(required=True)


@storefront.event(part_of="User")
class EmailVerified:
    __version__ = 1

    user_id: Identifier(required=True)
    email: String(required=True)
    verified_at: DateTime(required=True)


@storefront.event(part_of="User")
class UserLoggedIn:
    __version__ = 1

    user_id: Identifier(required=True)
    logged_in_at: DateTime(required=True)


@storefront.event(part_of="User")
class AccountLocked:
    """Raised when repeated failed logins lock the account."""

    __version__ = 1

    user_id: Identifier(required=True)
    attempts: Integer(required=True)
    locked_until: DateTime(required=True)


@storefront.event(part_of="User")
class PasswordResetRequested:
    __version__ = 1

    user_id: Identifier(required=True)
    expires_at: DateTime(required=True)


@storefront.event(part_of="User")
class PasswordChanged:
    __version__ = 1

    user_id: Identifier(required=True)
    changed_at: DateTime(required=True)


@storefront.event(part_of="User")
class ProfileUpdated:
    __version__ = 1

    user_id: Identifier(required=True)
    name: String()
    email: String()


@storefront.event(part_of="User")
class AccountDeactivated:
    __version__ = 1

    user_id: Identifier(required=True)
    reason: String()
    deactivated_at: DateTime(required=True)


@storefront.event(part_of="User")
class GuestCartMerged:
    """Raised after a client-held cart is folded into the stored cart."""

    __version__ = 1

    user_id: Identifier(required=True)
    merged_lines: Integer(required=True)
    cart_lines: Integer(required=True)
