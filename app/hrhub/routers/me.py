from fastapi import APIRouter, Depends

from app.hrhub.core.constants import Action, Module, permission_key
from app.hrhub.core.context import Principal
from app.hrhub.core.deps import get_current_principal
from app.hrhub.db.session import get_db
from app.hrhub.repos.companies import CompanyRepository
from app.hrhub.schemas.auth import MeResponse
from app.hrhub.schemas.envelope import DataEnvelope, envelope

router = APIRouter()


def _effective_permissions(principal: Principal) -> list[str]:
    if principal.is_superadmin:
        return [permission_key(module, action) for module in Module.ALL for action in Action.ALL]
    return sorted(principal.permissions)


@router.get("/me", response_model=DataEnvelope[MeResponse])
def me(principal: Principal = Depends(get_current_principal), db=Depends(get_db)):
    company = CompanyRepository(db).get_by_id(principal.company_id)
    return envelope(
        MeResponse(
            user_id=principal.user_id,
            employee_id=principal.employee_id,
            role=principal.role,
            company_id=principal.company_id,
            company_code=company.code if company else None,
            company_name=company.name if company else None,
            permissions=_effective_permissions(principal),
        )
    )
