from __future__ import annotations

from app.hrhub.core.config import settings
from app.hrhub.core.constants import permission_key
from app.hrhub.repos.rbac import RolePermissionRepository
from app.hrhub.services.cache import CacheBackend, get_cache


def _cache_key(role_code: str) -> str:
    return f"hrhub:permissions:{role_code}"


class AccessControlService:
    """Resolves a role's permission set.

    Lookup order is the per-request ``cache`` dict, then the shared cache,
    then the ``role_permissions`` table.
    """

    def __init__(self, db, cache: dict | None = None, shared_cache: CacheBackend | None = None):
        self.repo = RolePermissionRepository(db)
        self.cache = cache if cache is not None else {}
        self.shared_cache = shared_cache if shared_cache is not None else get_cache()

    def permissions_for_role(self, role_code: str | None) -> set[str]:
        if not role_code:
            return set()
        if role_code in self.cache:
            return self.cache[role_code]

        cached = self.shared_cache.get_json(_cache_key(role_code))
        if isinstance(cached, list):
            permissions = {str(item) for item in cached}
        else:
            permissions = {
                permission_key(module, action) for module, action in self.repo.list_pairs_for_role(role_code)
            }
            self.shared_cache.set_json(
                _cache_key(role_code),
                sorted(permissions),
                ttl=settings.CACHE_PERMISSIONS_TTL,
            )
        self.cache[role_code] = permissions
        return permissions
