from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Query, Request

from saas_starter.api.deps import (
    get_auth_session,
    get_create_billing_portal_session_use_case,
    get_create_checkout_session_use_case,
    get_pricing_plan_use_case,
    get_process_stripe_webhook_use_case,
    get_session_manager,
    get_subscription_overview_use_case,
)
from saas_starter.api.responses import error_response, ok
from saas_starter.api.schemas.billing import SubscribeRequest
from saas_starter.api.session import SessionManager, SessionWithCookie
from saas_starter.application.dto.billing import CreateCheckoutSessionInput, StripeWebhookInput
from saas_starter.application.use_cases.create_billing_portal_session import (
    CreateBillingPortalSessionUseCase,
)
from saas_starter.application.use_cases.create_checkout_session import CreateCheckoutSessionUseCase
from saas_starter.application.use_cases.get_pricing_plan import GetPricingPlanUseCase
from saas_starter.application.use_cases.get_subscription_overview import GetSubscriptionOverviewUseCase
from saas_starter.application.use_cases.process_stripe_webhook import ProcessStripeWebhookUseCase
from saas_starter.domain.entities.user import AuthSession
from saas_starter.shared.config import get_settings
from saas_starter.shared.result import Failure


router = APIRouter()


async def read_raw_body(request: Request) -> bytes:
    return await request.body()


@router.get("/pricing")
def pricing(
    currency: str | None = Query(None),
    use_case: GetPricingPlanUseCase = Depends(get_pricing_plan_use_case),
):
    result = use_case.execute(currency=(currency or get_settings().default_currency).lower())
    if isinstance(result, Failure):
        return error_response(result.error, auth_session=None)
    return ok(result.data, auth_session=None)


@router.get("/subscription")
def subscription(
    auth_session: SessionWithCookie[AuthSession] = Depends(get_auth_session),
    use_case: GetSubscriptionOverviewUseCase = Depends(get_subscription_overview_use_case),
):
    result = use_case.execute(user_id=auth_session.value.user_id)
    if isinstance(result, Failure):
        return error_response(result.error, auth_session=auth_session)
    return ok(result.data, auth_session=auth_session)


@router.post("/api/subscribe")
def subscribe(
    req: SubscribeRequest,
    auth_session: SessionWithCookie[AuthSession] = Depends(get_auth_session),
    session_manager: SessionManager = Depends(get_session_manager),
    use_case: CreateCheckoutSessionUseCase = Depends(get_create_checkout_session_use_case),
):
    result = use_case.execute(
        CreateCheckoutSessionInput(user_id=auth_session.value.user_id, price_id=req.price_id)
    )
    if isinstance(result, Failure):
        return error_response(result.error, auth_session=auth_session)
    return session_manager.redirect(result.data.url, session=auth_session)


@router.post("/api/customer-portal")
def customer_portal(
    auth_session: SessionWithCookie[AuthSession] = Depends(get_auth_session),
    session_manager: SessionManager = Depends(get_session_manager),
    use_case: CreateBillingPortalSessionUseCase = Depends(get_create_billing_portal_session_use_case),
):
    result = use_case.execute(user_id=auth_session.value.user_id)
    if isinstance(result, Failure):
        return error_response(result.error, auth_session=auth_session)
    return session_manager.redirect(result.data.url, session=auth_session)


@router.post("/api/webhook")
def stripe_webhook(
    payload: bytes = Depends(read_raw_body),
    stripe_signature: str | None = Header(None, alias="Stripe-Signature"),
    use_case: ProcessStripeWebhookUseCase = Depends(get_process_stripe_webhook_use_case),
):
    result = use_case.execute(StripeWebhookInput(signature=stripe_signature, payload=payload))
    if isinstance(result, Failure):
        return error_response(result.error, auth_session=None)
    return ok(result.data, auth_session=None)
