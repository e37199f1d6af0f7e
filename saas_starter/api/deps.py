from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, HTTPException, Request

from saas_starter.api.session import SessionManager, SessionWithCookie
from saas_starter.application.use_cases.create_billing_portal_session import (
    CreateBillingPortalSessionUseCase,
)
from saas_starter.application.use_cases.create_checkout_session import CreateCheckoutSessionUseCase
from saas_starter.application.use_cases.create_local_subscription import CreateLocalSubscriptionUseCase
from saas_starter.application.use_cases.create_note import CreateNoteUseCase
from saas_starter.application.use_cases.create_user_account import CreateUserAccountUseCase
from saas_starter.application.use_cases.delete_local_subscription import DeleteLocalSubscriptionUseCase
from saas_starter.application.use_cases.delete_note import DeleteNoteUseCase
from saas_starter.application.use_cases.delete_user_account import DeleteUserAccountUseCase
from saas_starter.application.use_cases.fetch_remote_subscription import FetchRemoteSubscriptionUseCase
from saas_starter.application.use_cases.get_pricing_plan import GetPricingPlanUseCase
from saas_starter.application.use_cases.get_subscription_overview import GetSubscriptionOverviewUseCase
from saas_starter.application.use_cases.list_notes import ListNotesUseCase
from saas_starter.application.use_cases.process_stripe_webhook import ProcessStripeWebhookUseCase
from saas_starter.application.use_cases.require_auth_session import RequireAuthSessionUseCase
from saas_starter.application.use_cases.sign_in import SignInUseCase
from saas_starter.application.use_cases.update_local_subscription import UpdateLocalSubscriptionUseCase
from saas_starter.application.use_cases.update_note import UpdateNoteUseCase
from saas_starter.application.use_cases.update_tier_metadata import UpdateTierMetadataUseCase
from saas_starter.domain.entities.user import AuthSession
from saas_starter.infrastructure.clients.stripe_client import StripeClient
from saas_starter.infrastructure.clients.supabase_auth_client import (
    SupabaseAuthClient,
    SupabaseAuthClientSettings,
)
from saas_starter.infrastructure.db.engine import get_engine
from saas_starter.infrastructure.db.repositories.accounts_repository import SqlAccountsRepository
from saas_starter.infrastructure.db.repositories.notes_repository import SqlNotesRepository
from saas_starter.infrastructure.db.repositories.pricing_repository import SqlPricingRepository
from saas_starter.infrastructure.security.cookie_session_storage import CookieSessionStorage
from saas_starter.shared.config import get_settings


def _get_db_engine():
    settings = get_settings()
    if not settings.postgres_dsn:
        raise HTTPException(status_code=500, detail="POSTGRES_DSN is required.")
    return get_engine(settings.postgres_dsn)


def _get_accounts_repository() -> SqlAccountsRepository:
    return SqlAccountsRepository(_get_db_engine())


def _get_notes_repository() -> SqlNotesRepository:
    return SqlNotesRepository(_get_db_engine())


def _get_pricing_repository() -> SqlPricingRepository:
    return SqlPricingRepository(_get_db_engine())


@lru_cache(maxsize=1)
def _get_stripe_client() -> StripeClient:
    settings = get_settings()
    if not settings.stripe_secret_key:
        raise HTTPException(status_code=500, detail="STRIPE_SECRET_KEY is required.")
    if not settings.stripe_endpoint_secret:
        raise HTTPException(status_code=500, detail="STRIPE_ENDPOINT_SECRET is required.")
    return StripeClient(
        secret_key=settings.stripe_secret_key,
        endpoint_secret=settings.stripe_endpoint_secret,
        server_url=settings.server_url,
        api_version=settings.stripe_api_version,
    )


@lru_cache(maxsize=1)
def _get_identity_client() -> SupabaseAuthClient:
    settings = get_settings()
    if not settings.supabase_url:
        raise HTTPException(status_code=500, detail="SUPABASE_URL is required.")
    if not settings.supabase_anon_key or not settings.supabase_service_role_key:
        raise HTTPException(
            status_code=500,
            detail="SUPABASE_ANON_KEY and SUPABASE_SERVICE_ROLE_KEY are required.",
        )
    return SupabaseAuthClient(
        SupabaseAuthClientSettings(
            url=settings.supabase_url,
            anon_key=settings.supabase_anon_key,
            service_role_key=settings.supabase_service_role_key,
            timeout_seconds=settings.supabase_timeout_seconds,
        )
    )


@lru_cache(maxsize=1)
def _get_cookie_session_storage() -> CookieSessionStorage:
    settings = get_settings()
    if not settings.session_secrets:
        raise HTTPException(status_code=500, detail="SESSION_SECRET is required.")
    return CookieSessionStorage(secrets=settings.session_secrets, secure=settings.is_production)


def get_session_manager() -> SessionManager:
    return SessionManager(
        storage=_get_cookie_session_storage(),
        require_auth_session=RequireAuthSessionUseCase(identity_port=_get_identity_client()),
    )


def get_auth_session(
    request: Request,
    session_manager: SessionManager = Depends(get_session_manager),
) -> SessionWithCookie[AuthSession]:
    return session_manager.require_session(request)


def get_create_user_account_use_case() -> CreateUserAccountUseCase:
    return CreateUserAccountUseCase(
        user_port=_get_accounts_repository(),
        identity_port=_get_identity_client(),
        stripe_port=_get_stripe_client(),
        default_currency=get_settings().default_currency,
    )


def get_sign_in_use_case() -> SignInUseCase:
    return SignInUseCase(identity_port=_get_identity_client())


def get_delete_user_account_use_case() -> DeleteUserAccountUseCase:
    return DeleteUserAccountUseCase(
        user_port=_get_accounts_repository(),
        identity_port=_get_identity_client(),
        stripe_port=_get_stripe_client(),
    )


def get_list_notes_use_case() -> ListNotesUseCase:
    return ListNotesUseCase(note_port=_get_notes_repository(), user_port=_get_accounts_repository())


def get_create_note_use_case() -> CreateNoteUseCase:
    return CreateNoteUseCase(note_port=_get_notes_repository(), user_port=_get_accounts_repository())


def get_update_note_use_case() -> UpdateNoteUseCase:
    return UpdateNoteUseCase(note_port=_get_notes_repository())


def get_delete_note_use_case() -> DeleteNoteUseCase:
    return DeleteNoteUseCase(note_port=_get_notes_repository())


def get_pricing_plan_use_case() -> GetPricingPlanUseCase:
    return GetPricingPlanUseCase(pricing_port=_get_pricing_repository())


def get_subscription_overview_use_case() -> GetSubscriptionOverviewUseCase:
    accounts = _get_accounts_repository()
    return GetSubscriptionOverviewUseCase(user_port=accounts, subscription_port=accounts)


def get_create_checkout_session_use_case() -> CreateCheckoutSessionUseCase:
    accounts = _get_accounts_repository()
    return CreateCheckoutSessionUseCase(
        user_port=accounts,
        subscription_port=accounts,
        stripe_port=_get_stripe_client(),
    )


def get_create_billing_portal_session_use_case() -> CreateBillingPortalSessionUseCase:
    return CreateBillingPortalSessionUseCase(
        user_port=_get_accounts_repository(),
        stripe_port=_get_stripe_client(),
    )


def get_process_stripe_webhook_use_case() -> ProcessStripeWebhookUseCase:
    accounts = _get_accounts_repository()
    stripe_client = _get_stripe_client()
    return ProcessStripeWebhookUseCase(
        stripe_port=stripe_client,
        fetch_remote_subscription=FetchRemoteSubscriptionUseCase(stripe_port=stripe_client),
        create_local_subscription=CreateLocalSubscriptionUseCase(subscription_port=accounts),
        update_local_subscription=UpdateLocalSubscriptionUseCase(subscription_port=accounts),
        delete_local_subscription=DeleteLocalSubscriptionUseCase(subscription_port=accounts),
        update_tier_metadata=UpdateTierMetadataUseCase(tier_port=accounts),
    )
