from __future__ import annotations

import enum


class UserRole(enum.StrEnum):
    """System-wide role of a user."""

    MEMBER = "member"
    ADMIN = "admin"


class TeamRole(enum.StrEnum):
    """Role of a user inside one team."""

    MEMBER = "member"
    TEAM_ADMIN = "team_admin"


class ActivityStatus(enum.StrEnum):
    """Progress state of a work-log entry."""

    IN_PROGRESS = "InProgress"
    DONE = "Done"
    BLOCKED = "Blocked"


class RedemptionStatus(enum.StrEnum):
    """State machine for reward redemptions."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


class PokerStatus(enum.StrEnum):
    """Lifecycle of a planning-poker session."""

    VOTING = "voting"
    REVEALED = "revealed"
    COMPLETED = "completed"


class AuthType(enum.StrEnum):
    """Where a session's credentials were checked."""

    REDMINE = "redmine"
    LOCAL = "local"


class AuditEntityType(enum.StrEnum):
    """Entity type recorded in the audit log."""

    REWARD = "REWARD"
    REDEMPTION = "REDEMPTION"
    POINTS = "POINTS"
    TEAM = "TEAM"
    TOP_PERFORMER = "TOP_PERFORMER"


class AuditAction(enum.StrEnum):
    """Action recorded in the audit log."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    CANCEL = "CANCEL"
    ACTIVATE = "ACTIVATE"
    GRANT = "GRANT"
