"""Address book commands."""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.user import User


@storefront.command(part_of="User")
class AddAddress:
    user_id: Identifier(required=True)
    name: String(required=True, max_length=100)
    address: String(required=True, max_length=255)
    city: String(required=True, max_length=100)
    state: String(max_length=100)
    postal_code: String(required=True, max_length=20)
    country: String(max_length=100)
    phone: String(required=True, max_length=20)
    is_default: Boolean(default=False)


@storefront.command(part_of="User")
class UpdateAddress:
    user_id: Identifier(required=True)
    address_id: Identifier(required=True)
    name: String(max_length=100)
    address: String(max_length=255)
    city: String(max_length=100)
    state: String(max_length=100)
    postal_code: String(max_length=20)
    country: String(max_length=100)
    phone: String(max_length=20)
    is_default: Boolean()


@storefront.command(part_of="User")
class RemoveAddress:
    user_id: Identifier(required=True)
    address_id: Identifier(required=True)


_EDITABLE = ("name", "address", "city", "state", "postal_code", "country", "phone", "is_default")


@storefront.command_handler(part_of=User)
class AddressBookHandler:
    @handle(AddAddress)
    def add_address(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        address = user.add_address(
            name=command.name,
            address=command.address,
            city=command.city,
            state=command.state,
            postal_code=command.postal_code,
            country=command.country,
            phone=command.phone,
            is_default=command.is_default,
        )
        repo.add(user)
        return str(address.id)

    @handle(UpdateAddress)
    def update_address(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        changes = {field: getattr(command, field) for field in _EDITABLE if getattr(command, field) is not None}
        user.update_address(command.address_id, **changes)
        repo.add(user)

    @handle(RemoveAddress)
    def remove_address(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.remove_address(command.address_id)
        repo.add(user)
