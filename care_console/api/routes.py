"""API routes for customer profile actions."""

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import Field

from care_console.api.client import CustomerStore
from care_console.config import get_settings
from care_console.exceptions import CustomerNotFoundError, PersistenceError
from care_console.ledger import history
from care_console.models.base import WireModel
from care_console.models.customer import Customer, CustomerLogEntry, DiscoveryChannel
from care_console.models.staff import StaffMember
from care_console.models.voucher import Voucher
from care_console.services.notifications import CollectingNotifier, Notification
from care_console.services.profile import ActionResult, CustomerProfileService
from care_console.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


# Request/Response Models


class StaffActionRequest(WireModel):
    """Base for requests made on behalf of a console user."""

    performed_by: StaffMember


class PointsRequest(StaffActionRequest):
    """Grant or deduct points."""

    amount: int
    reason: str = ""


class VoucherRequest(StaffActionRequest):
    """Redeem points for a voucher."""

    points: int


class ImpressionRequest(StaffActionRequest):
    """Record a visit impression."""

    product_quality_rating: int
    branch_experience_rating: int
    branch_id: str
    product_quality_notes: str | None = None
    branch_experience_notes: str | None = None
    discovery_channel: DiscoveryChannel | None = None
    is_first_visit: bool = False
    related_invoice_ids: list[str] = Field(default_factory=list)
    visit_time: str | None = None


class ActionResponse(WireModel):
    """Outcome of an action with the notifications to show."""

    action: str
    success: bool
    customer: Customer | None = None
    voucher: Voucher | None = None
    notifications: list[Notification] = Field(default_factory=list)
    error_code: str | None = None


# Dependencies


def get_store(request: Request) -> CustomerStore:
    """Get the data store client built by the app lifespan."""
    return request.app.state.store


def get_profile_service(
    store: CustomerStore = Depends(get_store),
) -> CustomerProfileService:
    """Build a profile service that collects its notifications."""
    settings = get_settings()
    return CustomerProfileService(
        store,
        CollectingNotifier(),
        settings.system_settings(),
        date_format=settings.voucher_date_format,
    )


async def load_customer(customer_id: str, store: CustomerStore) -> Customer:
    """Fetch the snapshot an action works on."""
    try:
        return await store.get_customer(customer_id)
    except CustomerNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Customer not found",
        )
    except PersistenceError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=e.message,
        )


_ERROR_STATUS = {
    "CONFLICT": status.HTTP_409_CONFLICT,
    "ACTION_NOT_PERMITTED": status.HTTP_403_FORBIDDEN,
    "CUSTOMER_NOT_FOUND": status.HTTP_502_BAD_GATEWAY,
    "API_TIMEOUT": status.HTTP_502_BAD_GATEWAY,
    "API_UNREACHABLE": status.HTTP_502_BAD_GATEWAY,
    "API_ERROR": status.HTTP_502_BAD_GATEWAY,
    "API_BAD_RESPONSE": status.HTTP_502_BAD_GATEWAY,
}


def to_response(
    result: ActionResult,
    service: CustomerProfileService,
    response: Response,
) -> ActionResponse:
    """Translate an ActionResult, setting the HTTP status for failures."""
    if not result.success:
        response.status_code = _ERROR_STATUS.get(result.error_code, 422)

    notifications = getattr(service.notifier, "notifications", [result.notification])

    return ActionResponse(
        action=result.action,
        success=result.success,
        customer=result.customer,
        voucher=result.voucher,
        notifications=list(notifications),
        error_code=result.error_code,
    )


# Routes


@router.get("/customers/{customer_id}", response_model=Customer)
async def get_customer(
    customer_id: str,
    store: CustomerStore = Depends(get_store),
) -> Customer:
    """Get a customer profile."""
    return await load_customer(customer_id, store)


@router.get("/customers/{customer_id}/history", response_model=list[CustomerLogEntry])
async def get_customer_history(
    customer_id: str,
    store: CustomerStore = Depends(get_store),
) -> list[CustomerLogEntry]:
    """Get a customer's history, most recent first."""
    customer = await load_customer(customer_id, store)
    return history.entries(customer)


@router.post("/customers/{customer_id}/points/grant", response_model=ActionResponse)
async def grant_points(
    customer_id: str,
    request: PointsRequest,
    response: Response,
    store: CustomerStore = Depends(get_store),
    service: CustomerProfileService = Depends(get_profile_service),
) -> ActionResponse:
    """Manually grant points to a customer."""
    customer = await load_customer(customer_id, store)
    result = await service.grant_points(
        customer, request.amount, request.reason, request.performed_by
    )
    return to_response(result, service, response)


@router.post("/customers/{customer_id}/points/deduct", response_model=ActionResponse)
async def deduct_points(
    customer_id: str,
    request: PointsRequest,
    response: Response,
    store: CustomerStore = Depends(get_store),
    service: CustomerProfileService = Depends(get_profile_service),
) -> ActionResponse:
    """Manually deduct points from a customer."""
    customer = await load_customer(customer_id, store)
    result = await service.deduct_points(
        customer, request.amount, request.reason, request.performed_by
    )
    return to_response(result, service, response)


@router.post("/customers/{customer_id}/vouchers", response_model=ActionResponse)
async def issue_voucher(
    customer_id: str,
    request: VoucherRequest,
    response: Response,
    store: CustomerStore = Depends(get_store),
    service: CustomerProfileService = Depends(get_profile_service),
) -> ActionResponse:
    """
    Redeem points for a discount voucher.

    The response carries the voucher to print.
    """
    customer = await load_customer(customer_id, store)
    result = await service.issue_voucher(customer, request.points, request.performed_by)

    if result.voucher:
        logger.info(
            "voucher_issued",
            customer_id=customer_id,
            code=result.voucher.code,
            amount=str(result.voucher.amount),
        )

    return to_response(result, service, response)


@router.post("/customers/{customer_id}/impressions", response_model=ActionResponse)
async def record_impression(
    customer_id: str,
    request: ImpressionRequest,
    response: Response,
    store: CustomerStore = Depends(get_store),
    service: CustomerProfileService = Depends(get_profile_service),
) -> ActionResponse:
    """Record a visit impression for a customer."""
    customer = await load_customer(customer_id, store)
    result = await service.record_impression(
        customer,
        request.performed_by,
        product_quality_rating=request.product_quality_rating,
        branch_experience_rating=request.branch_experience_rating,
        branch_id=request.branch_id,
        product_quality_notes=request.product_quality_notes,
        branch_experience_notes=request.branch_experience_notes,
        discovery_channel=request.discovery_channel,
        is_first_visit=request.is_first_visit,
        related_invoice_ids=request.related_invoice_ids,
        visit_time=request.visit_time,
    )
    return to_response(result, service, response)
