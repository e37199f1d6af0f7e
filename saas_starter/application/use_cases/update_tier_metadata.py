from __future__ import annotations

from saas_starter.application.dto.billing import UpdatedTierOutput, UpdateTierMetadataInput
from saas_starter.application.ports.tier_port import TierPort
from saas_starter.domain.exceptions import AppError, InternalError
from saas_starter.shared.result import Result, failure, success


class UpdateTierMetadataUseCase:
    def __init__(self, *, tier_port: TierPort):
        self._tier_port = tier_port

    def execute(self, command: UpdateTierMetadataInput) -> Result[UpdatedTierOutput]:
        try:
            updated_at = self._tier_port.update_tier(
                tier_id=command.tier_id,
                name=command.name,
                active=command.active,
                description=command.description,
            )
        except AppError as exc:
            return failure(
                InternalError(
                    "Unable to update tier",
                    cause=exc,
                    metadata={
                        "tier_id": command.tier_id,
                        "name": command.name,
                        "active": command.active,
                        "description": command.description,
                    },
                    tag="tier-service",
                )
            )
        return success(UpdatedTierOutput(id=command.tier_id, updated_at=updated_at))
