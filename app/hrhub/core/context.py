from dataclasses import dataclass, field

from fastapi import Request

from app.hrhub.core.constants import Role, permission_key


@dataclass(frozen=True)
class Principal:
    user_id: str
    employee_id: str | None
    role: str
    company_id: str
    trace_id: str = ""
    permissions: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_superadmin(self) -> bool:
        return self.role == Role.SUPER_ADMIN

    def has_permission(self, module: str, action: str) -> bool:
        if self.is_superadmin:
            return True
        return permission_key(module, action) in self.permissions


def get_principal(request: Request) -> Principal | None:
    principal = getattr(request.state, "principal", None)
    if isinstance(principal, Principal):
        return principal
    return None
