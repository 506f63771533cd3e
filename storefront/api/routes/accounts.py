"""Account and VIP Circle routes."""

from fastapi import APIRouter, Depends, status

from storefront.api.deps import CurrentAccount
from storefront.schemas.account import AccountResponse, VipEnrollResponse, VipStatusResponse
from storefront.services.vip_service import VipService, get_vip_service

router = APIRouter(tags=["accounts"])


@router.get("/accounts/me", response_model=AccountResponse)
async def get_my_account(account: CurrentAccount) -> AccountResponse:
    """Return the current account."""
    return AccountResponse(**account)


@router.post(
    "/vip/enroll",
    response_model=VipEnrollResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Join the VIP Circle",
)
async def enroll_vip(
    account: CurrentAccount,
    vip_service: VipService = Depends(get_vip_service),
) -> VipEnrollResponse:
    enrolled = await vip_service.enroll(account)
    return VipEnrollResponse(
        vip_number=enrolled["vip_number"],
        message="Successfully enrolled in VIP Circle!",
    )


@router.get("/vip/status", response_model=VipStatusResponse, summary="VIP Circle progress")
async def vip_status(
    account: CurrentAccount,
    vip_service: VipService = Depends(get_vip_service),
) -> VipStatusResponse:
    return VipStatusResponse.model_validate(vip_service.status(account))
