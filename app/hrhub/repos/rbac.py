from sqlalchemy import select

from app.hrhub.db.models import Permission, Role, RolePermission


class RolePermissionRepository:
    def __init__(self, db):
        self.db = db

    def list_pairs_for_role(self, role_code: str) -> list[tuple[str, str]]:
        stmt = (
            select(Permission.module, Permission.action)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .join(Role, Role.id == RolePermission.role_id)
            .where(Role.code == role_code)
            .order_by(Permission.module, Permission.action)
        )
        return [(module, action) for module, action in self.db.execute(stmt).all()]
