import uuid
from dataclasses import dataclass

from app.hrhub.core.context import Principal
from app.hrhub.core.error_catalog import bad_request, forbidden


def _parse_company_id(value: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(value))
    except ValueError as exc:
        raise bad_request(
            details={"issues": [{"field": "company_id", "message": "Invalid UUID", "type": "uuid_parsing"}]}
        ) from exc


@dataclass(frozen=True)
class TenantScope:
    """Company filter applied to every tenant-owned query.

    ``company_id`` is None only for a super-admin who did not ask for a
    specific company, which leaves reads unrestricted.
    """

    company_id: uuid.UUID | None

    def company_for_write(self) -> uuid.UUID:
        if self.company_id is None:
            raise bad_request(
                "company_id is required",
                details={"issues": [{"field": "company_id", "message": "Field required", "type": "missing"}]},
            )
        return self.company_id


def build_tenant_scope(principal: Principal, requested_company_id: str | None = None) -> TenantScope:
    if principal.is_superadmin:
        if requested_company_id:
            return TenantScope(company_id=_parse_company_id(requested_company_id))
        return TenantScope(company_id=None)

    own_company = uuid.UUID(str(principal.company_id))
    if requested_company_id and _parse_company_id(requested_company_id) != own_company:
        raise forbidden("Cross-company access denied")
    return TenantScope(company_id=own_company)
