from __future__ import annotations

from saas_starter.application.dto.billing import RedirectUrlOutput
from saas_starter.application.ports.stripe_port import StripePort
from saas_starter.application.ports.user_port import UserPort
from saas_starter.domain.exceptions import AppError, NotFoundError
from saas_starter.shared.result import Result, failure, success


TAG = "billing-service"


class CreateBillingPortalSessionUseCase:
    def __init__(self, *, user_port: UserPort, stripe_port: StripePort):
        self._user_port = user_port
        self._stripe_port = stripe_port

    def execute(self, *, user_id: str) -> Result[RedirectUrlOutput]:
        try:
            billing_info = self._user_port.get_billing_info(user_id=user_id)
            if billing_info is None:
                raise NotFoundError("Unable to get billing info", metadata={"user_id": user_id}, tag=TAG)
            url = self._stripe_port.create_billing_portal_session(customer_id=billing_info.customer_id)
        except AppError as exc:
            return failure(exc)
        return success(RedirectUrlOutput(url=url))
