"""User aggregate root with embedded Address and CartItem entities.

The user record carries everything the storefront keeps per account:
credentials and their recovery tokens, login lockout state, the address
book, the wishlist and the server-side cart.
"""

import json
import re
from datetime import datetime, timedelta

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.identity.passwords import MIN_PASSWORD_LENGTH, hash_password, hash_token, new_token, verify_password
from storefront.shared.email import validated_email

MAX_LOGIN_ATTEMPTS = 5
LOCK_DURATION = timedelta(minutes=15)
VERIFICATION_TOKEN_TTL = timedelta(hours=24)
RESET_TOKEN_TTL = timedelta(minutes=10)
DEFAULT_AVATAR = "/images/default-avatar.png"

_PHONE_PATTERN = re.compile(r"^\+?\d{10,15}$")

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


def _same_variant(left, right) -> bool:
    return (left or None) == (right or None)


@storefront.entity(part_of="User")
class Address:
    """A shipping address in the user's address book."""

    name: String(required=True, max_length=100)
    address: String(required=True, max_length=255)
    city: String(required=True, max_length=100)
    state: String(max_length=100)
    postal_code: String(required=True, max_length=20)
    country: String(max_length=100, default="Pakistan")
    phone: String(required=True, max_length=20)
    is_default: Boolean(default=False)


@storefront.entity(part_of="User")
class CartItem:
    """A line in the user's stored cart. Prices are resolved from the catalog on read."""

    product_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1)
    variant: String(max_length=100)
    added_at: DateTime(default=datetime.now)


@storefront.aggregate
class User:
    """A storefront account, shopper or admin."""

    name: String(required=True, min_length=2, max_length=50)
    email: String(required=True, max_length=254, unique=True)
    password_hash: String(max_length=255)
    phone: String(max_length=20)
    avatar: String(max_length=500, default=DEFAULT_AVATAR)
    is_verified: Boolean(default=False)
    is_admin: Boolean(default=False)
    is_active: Boolean(default=True)
    email_verification_token: String(max_length=64)
    email_verification_expire: DateTime()
    reset_password_token: String(max_length=64)
    reset_password_expire: DateTime()
    login_attempts: Integer(default=0)
    lock_until: DateTime()
    last_login: DateTime()
    addresses: HasMany(Address)
    cart_items: HasMany(CartItem)
    wishlist: Text()
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @invariant.post
    def phone_must_be_valid(self):
        if self.phone and not _PHONE_PATTERN.match(re.sub(r"[\s\-()]", "", self.phone)):
            raise ValidationError({"phone": ["Please provide a valid phone number"]})

    @invariant.post
    def at_most_one_default_address(self):
        if len([a for a in self.addresses if a.is_default]) > 1:
            raise ValidationError({"addresses": ["Only one address can be the default"]})

    @classmethod
    def register(cls, name, email, password, phone=None):
        from storefront.identity.events import UserRegistered

        now = datetime.now()
        user = cls(
            name=name.strip() if name else name,
            email=validated_email(email),
            phone=phone,
            created_at=now,
            updated_at=now,
        )
        user.set_password(password)
        user.raise_(
            UserRegistered(
                user_id=user.id,
                name=user.name,
                email=user.email,
                registered_at=now,
            )
        )
        return user

    def _touch(self):
        self.updated_at = datetime.now()

    # Credentials

    def set_password(self, password):
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError({"password": [f"Password must be at least {MIN_PASSWORD_LENGTH} characters"]})
        self.password_hash = hash_password(password)

    def check_password(self, password) -> bool:
        return verify_password(password, self.password_hash)

    def change_password(self, current_password, new_password):
        from storefront.identity.events import PasswordChanged

        if not self.check_password(current_password):
            return False

        self.set_password(new_password)
        self._touch()
        self.raise_(PasswordChanged(user_id=self.id, changed_at=self.updated_at))
        return True

    # Login lockout

    def is_locked(self, now=None) -> bool:
        now = now or datetime.now()
        return bool(self.lock_until and self.lock_until > now)

    def record_failed_login(self, now=None):
        """Count a failed password attempt, locking the account at the threshold.

        An expired lock restarts the count at one.
        """
        from storefront.identity.events import AccountLocked

        now = now or datetime.now()

        if self.lock_until and self.lock_until <= now:
            with atomic_change(self):
                self.login_attempts = 1
                self.lock_until = None
            return

        self.login_attempts = (self.login_attempts or 0) + 1
        if self.login_attempts >= MAX_LOGIN_ATTEMPTS and not self.is_locked(now):
            self.lock_until = now + LOCK_DURATION
            self.raise_(
                AccountLocked(
                    user_id=self.id,
                    attempts=self.login_attempts,
                    locked_until=self.lock_until,
                )
            )

    def record_successful_login(self, now=None):
        from storefront.identity.events import UserLoggedIn

        now = now or datetime.now()
        with atomic_change(self):
            self.login_attempts = 0
            self.lock_until = None
            self.last_login = now
        self.raise_(UserLoggedIn(user_id=self.id, logged_in_at=now))

    # Email verification

    def issue_verification_token(self, now=None) -> str:
        now = now or datetime.now()
        raw, digest = new_token()
        with atomic_change(self):
            self.email_verification_token = digest
            self.email_verification_expire = now + VERIFICATION_TOKEN_TTL
        return raw

    def verify_email(self, raw_token, now=None):
        from storefront.identity.events import EmailVerified

        now = now or datetime.now()
        if (
            not self.email_verification_token
            or self.email_verification_token != hash_token(raw_token)
            or not self.email_verification_expire
            or self.email_verification_expire <= now
        ):
            raise ValidationError({"token": ["Invalid or expired verification token"]})

        with atomic_change(self):
            self.is_verified = True
            self.email_verification_token = None
            self.email_verification_expire = None
        self._touch()
        self.raise_(EmailVerified(user_id=self.id, email=self.email, verified_at=now))

    # Password recovery

    def issue_reset_token(self, now=None) -> str:
        from storefront.identity.events import PasswordResetRequested

        now = now or datetime.now()
        raw, digest = new_token()
        with atomic_change(self):
            self.reset_password_token = digest
            self.reset_password_expire = now + RESET_TOKEN_TTL
        self.raise_(PasswordResetRequested(user_id=self.id, expires_at=self.reset_password_expire))
        return raw

    def reset_password(self, raw_token, new_password, now=None):
        """Consume a reset token. The token works once and clears any lockout."""
        from storefront.identity.events import PasswordChanged

        now = now or datetime.now()
        if (
            not self.reset_password_token
            or self.reset_password_token != hash_token(raw_token)
            or not self.reset_password_expire
            or self.reset_password_expire <= now
        ):
            raise ValidationError({"token": ["Invalid or expired reset token"]})

        self.set_password(new_password)
        with atomic_change(self):
            self.reset_password_token = None
            self.reset_password_expire = None
            self.login_attempts = 0
            self.lock_until = None
        self._touch()
        self.raise_(PasswordChanged(user_id=self.id, changed_at=now))

    # Profile

    def update_details(self, name=_UNSET, email=_UNSET, phone=_UNSET, avatar=_UNSET):
        from storefront.identity.events import ProfileUpdated

        with atomic_change(self):
            if name is not _UNSET and name is not None:
                self.name = name.strip()
            if email is not _UNSET and email is not None:
                self.email = validated_email(email)
            if phone is not _UNSET:
                self.phone = phone or None
            if avatar is not _UNSET and avatar:
                self.avatar = avatar
        self._touch()
        self.raise_(ProfileUpdated(user_id=self.id, name=self.name, email=self.email))

    def grant_admin(self, is_admin: bool):
        self.is_admin = bool(is_admin)
        self._touch()

    def deactivate(self, reason=None):
        from storefront.identity.events import AccountDeactivated

        if not self.is_active:
            raise ValidationError({"is_active": ["Account is already deactivated"]})

        self.is_active = False
        self._touch()
        self.raise_(AccountDeactivated(user_id=self.id, reason=reason, deactivated_at=self.updated_at))

    def reactivate(self):
        self.is_active = True
        self._touch()

    # Address book

    def _find_address(self, address_id):
        address = next((a for a in self.addresses if a.id == address_id), None)
        if address is None:
            raise ValidationError({"addresses": [f"Address {address_id} not found"]})
        return address

    def _clear_default_address(self):
        for addr in self.addresses:
            if addr.is_default:
                addr.is_default = False

    def add_address(self, name, address, city, postal_code, phone, state=None, country=None, is_default=False):
        with atomic_change(self):
            if is_default:
                self._clear_default_address()

            entry = Address(
                name=name,
                address=address,
                city=city,
                state=state,
                postal_code=postal_code,
                country=country or "Pakistan",
                phone=phone,
                is_default=bool(is_default),
            )
            self.add_addresses(entry)
        self._touch()
        return entry

    def update_address(self, address_id, **changes):
        entry = self._find_address(address_id)

        with atomic_change(self):
            if changes.get("is_default"):
                self._clear_default_address()
            for field, value in changes.items():
                if value is not None:
                    setattr(entry, field, value)
        self._touch()
        return entry

    def remove_address(self, address_id):
        entry = self._find_address(address_id)
        self.remove_addresses(entry)
        self._touch()

    # Wishlist

    @property
    def wishlist_ids(self) -> list[str]:
        return json.loads(self.wishlist) if self.wishlist else []

    def add_to_wishlist(self, product_id):
        ids = self.wishlist_ids
        if product_id not in ids:
            ids.append(product_id)
            self.wishlist = json.dumps(ids)
            self._touch()

    def remove_from_wishlist(self, product_id):
        ids = [pid for pid in self.wishlist_ids if pid != product_id]
        self.wishlist = json.dumps(ids)
        self._touch()

    # Cart

    def find_cart_line(self, product_id, variant=None):
        return next(
            (i for i in self.cart_items if i.product_id == product_id and _same_variant(i.variant, variant)),
            None,
        )

    def cart_quantity_for(self, product_id, variant=None) -> int:
        line = self.find_cart_line(product_id, variant)
        return line.quantity if line else 0

    def add_to_cart(self, product_id, quantity, variant=None):
        """Add to the matching (product, variant) line or append a new one."""
        line = self.find_cart_line(product_id, variant)
        if line is not None:
            line.quantity += quantity
        else:
            line = CartItem(product_id=product_id, quantity=quantity, variant=variant or None)
            self.add_cart_items(line)
        self._touch()
        return line

    def _find_cart_item(self, item_id):
        item = next((i for i in self.cart_items if i.id == item_id), None)
        if item is None:
            raise ValidationError({"cart_items": [f"Cart item {item_id} not found"]})
        return item

    def update_cart_item(self, item_id, quantity):
        item = self._find_cart_item(item_id)
        item.quantity = quantity
        self._touch()
        return item

    def remove_cart_item(self, item_id):
        item = self._find_cart_item(item_id)
        self.remove_cart_items(item)
        self._touch()

    def clear_cart(self):
        with atomic_change(self):
            for item in list(self.cart_items):
                self.remove_cart_items(item)
        self._touch()

    def merge_guest_cart(self, guest_items):
        """Fold client-held cart lines into the stored cart.

        Lines matching on (product, variant) have their quantities summed,
        everything else is appended.
        """
        from storefront.identity.events import GuestCartMerged

        merged = 0
        with atomic_change(self):
            for entry in guest_items:
                product_id = entry["product_id"]
                quantity = int(entry.get("quantity", 1))
                variant = entry.get("variant") or None

                line = self.find_cart_line(product_id, variant)
                if line is not None:
                    line.quantity += quantity
                else:
                    self.add_cart_items(CartItem(product_id=product_id, quantity=quantity, variant=variant))
                merged += 1

        self._touch()
        self.raise_(GuestCartMerged(user_id=self.id, merged_lines=merged, cart_lines=len(self.cart_items)))
