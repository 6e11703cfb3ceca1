"""FastAPI endpoints for the signed-in customer's profile."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from atelier.identity.api.dependencies import require_identity
from atelier.identity.api.schemas import ProfileResponse, UpdateProfileRequest
from atelier.identity.identity import Identity
from atelier.identity.profile.management import RegisterCustomer, UpdateCustomerDetails
from atelier.identity.profile.profile import CustomerProfile

router = APIRouter(prefix="/me", tags=["profile"])


def _profile_response(profile: CustomerProfile) -> ProfileResponse:
    return ProfileResponse(
        user_id=str(profile.user_id),
        display_name=profile.display_name,
        email=profile.email,
        total_orders=profile.total_orders,
        total_spent=profile.total_spent,
    )


@router.get("", response_model=ProfileResponse)
async def get_profile(identity: Identity = Depends(require_identity)) -> ProfileResponse:
    command = RegisterCustomer(
        user_id=identity.user_id,
        display_name=identity.display_name,
        email=identity.email,
    )
    profile = current_domain.process(command, asynchronous=False)
    return _profile_response(profile)


@router.put("", response_model=ProfileResponse)
async def update_profile(body: UpdateProfileRequest, identity: Identity = Depends(require_identity)) -> ProfileResponse:
    current_domain.process(
        RegisterCustomer(user_id=identity.user_id, display_name=identity.display_name, email=identity.email),
        asynchronous=False,
    )
    current_domain.process(
        UpdateCustomerDetails(user_id=identity.user_id, display_name=body.display_name, email=body.email),
        asynchronous=False,
    )
    return _profile_response(current_domain.repository_for(CustomerProfile).get(identity.user_id))
