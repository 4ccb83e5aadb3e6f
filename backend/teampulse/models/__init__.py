from sqlmodel import SQLModel

from teampulse.models.activity import Activity
from teampulse.models.audit import AuditLog
from teampulse.models.base import TimestampMixin, UUIDBase
from teampulse.models.enums import (
    ActivityStatus,
    AuditAction,
    AuditEntityType,
    AuthType,
    PokerStatus,
    RedemptionStatus,
    TeamRole,
    UserRole,
)
from teampulse.models.points import PointTransaction
from teampulse.models.poker import PokerSession, PokerVote
from teampulse.models.reward import Redemption, Reward
from teampulse.models.team import Team, TeamMember
from teampulse.models.top_performer import TopPerformer
from teampulse.models.user import User
from teampulse.models.wfh import UserWFHQuota, WFHRecord

__all__ = [
    "Activity",
    "ActivityStatus",
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "AuthType",
    "PointTransaction",
    "PokerSession",
    "PokerStatus",
    "PokerVote",
    "Redemption",
    "RedemptionStatus",
    "Reward",
    "SQLModel",
    "Team",
    "TeamMember",
    "TeamRole",
    "TimestampMixin",
    "TopPerformer",
    "UUIDBase",
    "User",
    "UserRole",
    "UserWFHQuota",
    "WFHRecord",
]
