from __future__ import annotations

from datetime import datetime, timezone

from saas_starter.application.dto.auth import CreateUserAccountInput, SignInInput
from saas_starter.application.use_cases.create_user_account import CreateUserAccountUseCase
from saas_starter.application.use_cases.delete_user_account import DeleteUserAccountUseCase
from saas_starter.application.use_cases.sign_in import SignInUseCase
from saas_starter.domain.entities.user import AuthAccount, AuthSession, BillingInfo, User
from saas_starter.domain.exceptions import InternalError, UpstreamProviderError, ValidationError
from saas_starter.shared.result import Failure, Success


NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeUserPort:
    def __init__(self, *, fail_create: bool = False):
        self.users: dict[str, User] = {}
        self.fail_create = fail_create

    def get_user_by_email(self, *, email: str) -> User | None:
        for user in self.users.values():
            if user.email == email:
                return user
        return None

    def create_user(self, *, user_id, email, name, customer_id, currency, tier_id) -> User:
        if self.fail_create:
            raise InternalError("Unable to create user")
        user = User(
            id=user_id,
            email=email,
            name=name,
            customer_id=customer_id,
            currency=currency,
            tier_id=tier_id,
            created_at=NOW,
            updated_at=NOW,
        )
        self.users[user_id] = user
        return user

    def delete_user(self, *, user_id: str) -> None:
        self.users.pop(user_id)

    def get_billing_info(self, *, user_id: str) -> BillingInfo | None:
        user = self.users.get(user_id)
        if user is None:
            return None
        return BillingInfo(customer_id=user.customer_id, currency=user.currency)


class FakeIdentityPort:
    def __init__(self, *, fail_create: bool = False, fail_sign_in: bool = False):
        self.accounts: dict[str, str] = {}
        self.fail_create = fail_create
        self.fail_sign_in = fail_sign_in
        self.deleted: list[str] = []
        self.lookups: list[str] = []

    def create_account(self, *, email: str, password: str) -> AuthAccount:
        if self.fail_create:
            raise UpstreamProviderError("Unable to create identity account")
        account_id = f"user-{len(self.accounts) + 1}"
        self.accounts[account_id] = email
        return AuthAccount(id=account_id, created_at=NOW)

    def sign_in(self, *, email: str, password: str) -> AuthSession:
        if self.fail_sign_in:
            raise ValidationError("Invalid email or password")
        user_id = next(key for key, value in self.accounts.items() if value == email)
        return AuthSession(
            access_token="access",
            refresh_token="refresh",
            user_id=user_id,
            email=email,
            expires_in=3600,
            expires_at=1_700_000_000,
        )

    def delete_account(self, *, user_id: str) -> None:
        self.deleted.append(user_id)
        self.accounts.pop(user_id, None)

    def find_user_id_by_email(self, *, email: str) -> str | None:
        self.lookups.append(email)
        for key, value in self.accounts.items():
            if value == email:
                return key
        return None


class FakeStripePort:
    def __init__(self, *, fail_create: bool = False):
        self.fail_create = fail_create
        self.customers: list[str] = []
        self.deleted: list[str] = []

    def create_customer(self, *, email: str, name: str) -> str:
        if self.fail_create:
            raise UpstreamProviderError("Failed to create Stripe customer")
        customer_id = f"cus_{len(self.customers) + 1}"
        self.customers.append(customer_id)
        return customer_id

    def delete_customer(self, *, customer_id: str) -> None:
        self.deleted.append(customer_id)


def _create_use_case(users, identity, stripe_port) -> CreateUserAccountUseCase:
    return CreateUserAccountUseCase(
        user_port=users,
        identity_port=identity,
        stripe_port=stripe_port,
        default_currency="usd",
    )


def test_sign_up_creates_free_user_and_returns_session():
    users, identity, stripe_port = FakeUserPort(), FakeIdentityPort(), FakeStripePort()

    result = _create_use_case(users, identity, stripe_port).execute(
        CreateUserAccountInput(email=" Alice@Example.com ", password="password1", name="Alice")
    )

    assert isinstance(result, Success)
    assert result.data.user_id == "user-1"
    user = users.users["user-1"]
    assert user.email == "alice@example.com"
    assert user.tier_id == "free"
    assert user.currency == "usd"
    assert user.customer_id == "cus_1"


def test_sign_up_rejects_already_used_email():
    users, identity, stripe_port = FakeUserPort(), FakeIdentityPort(), FakeStripePort()
    users.create_user(
        user_id="existing",
        email="alice@example.com",
        name="Alice",
        customer_id="cus_0",
        currency="usd",
        tier_id="free",
    )

    result = _create_use_case(users, identity, stripe_port).execute(
        CreateUserAccountInput(email="alice@example.com", password="password1", name="Alice")
    )

    assert isinstance(result, Failure)
    assert isinstance(result.error, ValidationError)
    assert result.error.status == 403
    assert identity.accounts == {}


def test_sign_up_compensates_when_customer_creation_fails():
    users, identity, stripe_port = FakeUserPort(), FakeIdentityPort(), FakeStripePort(fail_create=True)

    result = _create_use_case(users, identity, stripe_port).execute(
        CreateUserAccountInput(email="alice@example.com", password="password1", name="Alice")
    )

    assert isinstance(result, Failure)
    assert result.error.message == "Unable to create user account"
    assert identity.deleted == ["user-1"]
    assert identity.accounts == {}
    assert stripe_port.deleted == []
    assert users.users == {}


def test_sign_up_compensates_customer_and_account_when_user_insert_fails():
    users = FakeUserPort(fail_create=True)
    identity, stripe_port = FakeIdentityPort(), FakeStripePort()

    result = _create_use_case(users, identity, stripe_port).execute(
        CreateUserAccountInput(email="alice@example.com", password="password1", name="Alice")
    )

    assert isinstance(result, Failure)
    assert stripe_port.deleted == ["cus_1"]
    assert identity.deleted == ["user-1"]


def test_sign_up_looks_account_up_by_email_when_id_is_unknown():
    users, stripe_port = FakeUserPort(), FakeStripePort()
    identity = FakeIdentityPort(fail_create=True)

    result = _create_use_case(users, identity, stripe_port).execute(
        CreateUserAccountInput(email="alice@example.com", password="password1", name="Alice")
    )

    assert isinstance(result, Failure)
    assert identity.lookups == ["alice@example.com"]
    assert identity.deleted == []


def test_sign_in_returns_provider_error_as_failure():
    identity = FakeIdentityPort(fail_sign_in=True)

    result = SignInUseCase(identity_port=identity).execute(
        SignInInput(email="alice@example.com", password="password1")
    )

    assert isinstance(result, Failure)
    assert result.error.status == 400


def test_delete_account_removes_customer_identity_and_user():
    users, identity, stripe_port = FakeUserPort(), FakeIdentityPort(), FakeStripePort()
    users.create_user(
        user_id="user-1",
        email="alice@example.com",
        name="Alice",
        customer_id="cus_1",
        currency="usd",
        tier_id="free",
    )
    identity.accounts["user-1"] = "alice@example.com"

    result = DeleteUserAccountUseCase(
        user_port=users,
        identity_port=identity,
        stripe_port=stripe_port,
    ).execute(user_id="user-1")

    assert isinstance(result, Success)
    assert stripe_port.deleted == ["cus_1"]
    assert identity.deleted == ["user-1"]
    assert users.users == {}


def test_delete_account_of_unknown_user_fails():
    result = DeleteUserAccountUseCase(
        user_port=FakeUserPort(),
        identity_port=FakeIdentityPort(),
        stripe_port=FakeStripePort(),
    ).execute(user_id="ghost")

    assert isinstance(result, Failure)
    assert result.error.status == 404
