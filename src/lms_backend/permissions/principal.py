from typing import Iterable, List, Optional, Set
from pydantic import BaseModel, ConfigDict, Field

from lms_backend.api.exceptions import NotFoundException


class Principal(BaseModel):
    """The authenticated user together with the permissions granted in one organization"""

    user_id: Optional[int] = None
    organization_id: Optional[int] = None
    permissions: Set[str] = Field(default_factory=set)

    model_config = ConfigDict(frozen=True)

    def get_user_id_or_throw(self) -> int:
        """Get user ID or raise exception"""
        if self.user_id is None:
            raise NotFoundException("User ID not found")
        return self.user_id

    def has_permission(self, key: str) -> bool:
        return key in self.permissions

    def missing_permissions(self, keys: Iterable[str]) -> List[str]:
        """Required keys the principal does not hold, in the order they were asked for"""
        return [key for key in keys if key not in self.permissions]

    def has_permissions(self, keys: Iterable[str]) -> bool:
        """All keys are required; an empty requirement is always satisfied"""
        return not self.missing_permissions(keys)
