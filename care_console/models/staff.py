"""Staff members acting on customer profiles."""

from enum import Enum

from care_console.models.base import WireModel


class UserRole(str, Enum):
    GENERAL_MANAGER = "GeneralManager"
    ACCOUNTS_MANAGER = "AccountsManager"
    TEAM_LEADER = "TeamLeader"
    MODERATOR = "Moderator"
    STAFF = "Staff"


# Moderators only view profiles
READ_ONLY_ROLES = frozenset({UserRole.MODERATOR})


class StaffMember(WireModel):
    """The console user performing an action."""

    id: str
    name: str
    role: UserRole = UserRole.STAFF

    @property
    def can_modify_customers(self) -> bool:
        return self.role not in READ_ONLY_ROLES
