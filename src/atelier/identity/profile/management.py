"""Customer profile — commands, handler and the lookup checkout relies on."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from atelier.domain import atelier
from atelier.identity.profile.profile import CustomerProfile
from atelier.utils.db import get_or_create


@atelier.command(part_of="CustomerProfile")
class RegisterCustomer:
    user_id: Identifier(required=True)
    display_name: String(max_length=255)
    email: String(max_length=254)


@atelier.command(part_of="CustomerProfile")
class UpdateCustomerDetails:
    user_id: Identifier(required=True)
    display_name: String(max_length=255)
    email: String(max_length=254)


def ensure_profile(identity):
    """Create the profile of ``identity`` if missing, outside any unit of work. Returns the stored profile."""
    return get_or_create(
        current_domain.repository_for(CustomerProfile),
        identity.user_id,
        lambda: CustomerProfile.register(
            user_id=identity.user_id,
            display_name=identity.display_name,
            email=identity.email,
        ),
    )


def profile_for(identity):
    """Load the stored profile of ``identity``. ``ensure_profile`` must have created it."""
    return current_domain.repository_for(CustomerProfile).get(identity.user_id)


@atelier.command_handler(part_of=CustomerProfile)
class ManageCustomerProfileHandler:
    @handle(RegisterCustomer)
    def register_customer(self, command):
        repo = current_domain.repository_for(CustomerProfile)
        try:
            return repo.get(command.user_id)
        except ObjectNotFoundError:
            profile = CustomerProfile.register(
                user_id=command.user_id,
                display_name=command.display_name,
                email=command.email,
            )
            repo.add(profile)
            return profile

    @handle(UpdateCustomerDetails)
    def update_customer_details(self, command):
        repo = current_domain.repository_for(CustomerProfile)
        profile = repo.get(command.user_id)
        profile.update_details(display_name=command.display_name, email=command.email)
        repo.add(profile)
