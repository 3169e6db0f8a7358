"""
Core types derived from the Rivet API definition.

Request dataclasses serialize to query params or JSON bodies (unset optional
fields are omitted). Response dataclasses are built from API response dicts.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from rivet_api.core.errors import ValidationError

# =============================================================================
# Enums
# =============================================================================


class WireEnum(str, Enum):
    """String enum whose value is the wire representation."""

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Any) -> "WireEnum":
        """
        Parse a wire string into a member.

        Raises:
            ValidationError: If the value is not one of the known members

        """
        for member in cls:
            if member.value == value:
                return member
        raise ValidationError(
            f"{value} is not a valid {cls.__name__}",
            details={"value": value, "type": cls.__name__},
        )


class LogStream(WireEnum):
    """Actor log stream."""

    STD_OUT = "std_out"
    STD_ERR = "std_err"


class GroupPublicity(WireEnum):
    """Whether anyone may join a group or only invited identities."""

    OPEN = "open"
    CLOSED = "closed"


class IdentityStatus(WireEnum):
    """Identity presence status."""

    ONLINE = "online"
    AWAY = "away"
    OFFLINE = "offline"


class CompleteStatus(WireEnum):
    """Outcome of completing an email verification."""

    SWITCH_IDENTITY = "switch_identity"
    LINKED_ACCOUNT_ADDED = "linked_account_added"
    ALREADY_COMPLETE = "already_complete"
    EXPIRED = "expired"
    TOO_MANY_ATTEMPTS = "too_many_attempts"
    INCORRECT = "incorrect"


def _omit_none(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


def _enum_value(value: WireEnum | None) -> str | None:
    return value.value if value is not None else None


# =============================================================================
# Common Types
# =============================================================================


@dataclass
class WatchResponse:
    """Cursor for re-fetching a resource once it changes."""

    index: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WatchResponse":
        """Create from API response dict."""
        return cls(index=data["index"])

    @classmethod
    def optional(cls, data: dict[str, Any] | None) -> "WatchResponse | None":
        """Create from an optional `watch` field."""
        if not data:
            return None
        return cls.from_dict(data)


@dataclass
class PresignedRequest:
    """A presigned upload request."""

    path: str
    url: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PresignedRequest":
        """Create from API response dict."""
        return cls(path=data.get("path", ""), url=data["url"])


@dataclass
class PrepareAvatarUploadRequest:
    """Request body for preparing an avatar upload."""

    path: str
    content_length: int
    mime: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _omit_none(
            {
                "path": self.path,
                "mime": self.mime,
                "content_length": self.content_length,
            }
        )


@dataclass
class PrepareAvatarUploadResponse:
    """Upload ID and presigned request for an avatar upload."""

    upload_id: str
    presigned_request: PresignedRequest

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PrepareAvatarUploadResponse":
        """Create from API response dict."""
        return cls(
            upload_id=data["upload_id"],
            presigned_request=PresignedRequest.from_dict(data["presigned_request"]),
        )


@dataclass
class ProfileValidationError:
    """A single profile validation failure."""

    path: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProfileValidationError":
        """Create from API response dict."""
        return cls(path=list(data.get("path") or []))


@dataclass
class ValidateProfileResponse:
    """Result of validating a profile update."""

    errors: list[ProfileValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ValidateProfileResponse":
        """Create from API response dict."""
        return cls(errors=[ProfileValidationError.from_dict(e) for e in data.get("errors") or []])


# =============================================================================
# Identity Types
# =============================================================================


@dataclass
class IdentityHandle:
    """An identity handle."""

    identity_id: str
    display_name: str
    account_number: int = 0
    avatar_url: str | None = None
    is_registered: bool = False
    external: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IdentityHandle":
        """Create from API response dict."""
        return cls(
            identity_id=data["identity_id"],
            display_name=data.get("display_name", ""),
            account_number=data.get("account_number", 0),
            avatar_url=data.get("avatar_url"),
            is_registered=data.get("is_registered", False),
            external=data.get("external") or {},
        )


@dataclass
class IdentitySummary(IdentityHandle):
    """An identity summary with follow relationships."""

    following: bool = False
    is_following_me: bool = False
    is_mutual_following: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IdentitySummary":
        """Create from API response dict."""
        handle = IdentityHandle.from_dict(data)
        return cls(
            **handle.__dict__,
            following=data.get("following", False),
            is_following_me=data.get("is_following_me", False),
            is_mutual_following=data.get("is_mutual_following", False),
        )


@dataclass
class GroupHandle:
    """A group handle."""

    group_id: str
    display_name: str
    avatar_url: str | None = None
    is_developer: bool | None = None
    external: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GroupHandle":
        """Create from API response dict."""
        return cls(
            group_id=data["group_id"],
            display_name=data.get("display_name", ""),
            avatar_url=data.get("avatar_url"),
            is_developer=data.get("is_developer"),
            external=data.get("external") or {},
        )


@dataclass
class IdentityProfile(IdentitySummary):
    """A full identity profile."""

    bio: str = ""
    follower_count: int = 0
    following_count: int = 0
    join_ts: str | None = None
    is_admin: bool = False
    is_game_linked: bool | None = None
    awaiting_deletion: bool | None = None
    groups: list[GroupHandle] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IdentityProfile":
        """Create from API response dict."""
        summary = IdentitySummary.from_dict(data)
        # Groups arrive wrapped as {"group": {...}}
        groups = [GroupHandle.from_dict(g.get("group", g)) for g in data.get("groups") or []]
        return cls(
            **summary.__dict__,
            bio=data.get("bio") or "",
            follower_count=data.get("follower_count", 0),
            following_count=data.get("following_count", 0),
            join_ts=data.get("join_ts"),
            is_admin=data.get("is_admin", False),
            is_game_linked=data.get("is_game_linked"),
            awaiting_deletion=data.get("awaiting_deletion"),
            groups=groups,
        )


@dataclass
class GameActivity:
    """Game activity shown on an identity."""

    message: str | None = None
    public_metadata: Any = None
    mutual_metadata: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _omit_none(
            {
                "message": self.message,
                "public_metadata": self.public_metadata,
                "mutual_metadata": self.mutual_metadata,
            }
        )


@dataclass
class SetupIdentityRequest:
    existing_identity_token: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _omit_none({"existing_identity_token": self.existing_identity_token})


@dataclass
class SetupIdentityResponse:
    """Token and profile of a newly set up (or refreshed) identity."""

    identity_token: str
    identity_token_expire_ts: str
    identity: IdentityProfile
    game_id: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SetupIdentityResponse":
        """Create from API response dict."""
        return cls(
            identity_token=data["identity_token"],
            identity_token_expire_ts=data.get("identity_token_expire_ts", ""),
            identity=IdentityProfile.from_dict(data["identity"]),
            game_id=data.get("game_id", ""),
        )


@dataclass
class GetIdentityProfileRequest:
    watch_index: str | None = None

    def to_params(self) -> dict[str, Any]:
        """Convert to query params."""
        return {"watch_index": self.watch_index}


@dataclass
class GetIdentityProfileResponse:
    identity: IdentityProfile
    watch: WatchResponse | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GetIdentityProfileResponse":
        """Create from API response dict."""
        return cls(
            identity=IdentityProfile.from_dict(data["identity"]),
            watch=WatchResponse.optional(data.get("watch")),
        )


@dataclass
class GetHandlesResponse:
    identities: list[IdentityHandle] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GetHandlesResponse":
        """Create from API response dict."""
        return cls(identities=[IdentityHandle.from_dict(i) for i in data.get("identities") or []])


@dataclass
class GetSummariesResponse:
    identities: list[IdentitySummary] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GetSummariesResponse":
        """Create from API response dict."""
        return cls(identities=[IdentitySummary.from_dict(i) for i in data.get("identities") or []])


@dataclass
class UpdateIdentityProfileRequest:
    """Profile fields to update or validate. Unset fields are left unchanged."""

    display_name: str | None = None
    account_number: int | None = None
    bio: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _omit_none(
            {
                "display_name": self.display_name,
                "account_number": self.account_number,
                "bio": self.bio,
            }
        )


@dataclass
class SetGameActivityRequest:
    game_activity: GameActivity

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return {"game_activity": self.game_activity.to_dict()}


@dataclass
class UpdateStatusRequest:
    status: IdentityStatus

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return {"status": self.status.value}


@dataclass
class SignupForBetaRequest:
    """Beta signup form."""

    name: str
    company_size: str
    preferred_tools: str
    goals: str
    company_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _omit_none(
            {
                "name": self.name,
                "company_name": self.company_name,
                "company_size": self.company_size,
                "preferred_tools": self.preferred_tools,
                "goals": self.goals,
            }
        )


# =============================================================================
# Identity Email Auth Types
# =============================================================================


@dataclass
class StartEmailVerificationRequest:
    email: str
    captcha: dict[str, Any] | None = None
    game_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _omit_none({"email": self.email, "captcha": self.captcha, "game_id": self.game_id})


@dataclass
class StartEmailVerificationResponse:
    verification_id: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StartEmailVerificationResponse":
        """Create from API response dict."""
        return cls(verification_id=data["verification_id"])


@dataclass
class CompleteEmailVerificationRequest:
    verification_id: str
    code: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return {"verification_id": self.verification_id, "code": self.code}


@dataclass
class CompleteEmailVerificationResponse:
    status: CompleteStatus

    @property
    def is_complete(self) -> bool:
        """Check if the verification went through."""
        return self.status in (
            CompleteStatus.SWITCH_IDENTITY,
            CompleteStatus.LINKED_ACCOUNT_ADDED,
            CompleteStatus.ALREADY_COMPLETE,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CompleteEmailVerificationResponse":
        """Create from API response dict."""
        return cls(status=CompleteStatus.parse(data["status"]))


# =============================================================================
# Group Types
# =============================================================================


@dataclass
class GroupSummary:
    """A group summary."""

    group_id: str
    display_name: str
    avatar_url: str | None = None
    bio: str = ""
    is_developer: bool = False
    is_current_identity_member: bool = False
    publicity: GroupPublicity | None = None
    member_count: int = 0
    owner_identity_id: str | None = None
    external: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GroupSummary":
        """Create from API response dict."""
        publicity = data.get("publicity")
        return cls(
            group_id=data["group_id"],
            display_name=data.get("display_name", ""),
            avatar_url=data.get("avatar_url"),
            bio=data.get("bio") or "",
            is_developer=data.get("is_developer", False),
            is_current_identity_member=data.get("is_current_identity_member", False),
            publicity=GroupPublicity.parse(publicity) if publicity is not None else None,
            member_count=data.get("member_count", 0),
            owner_identity_id=data.get("owner_identity_id"),
            external=data.get("external") or {},
        )


@dataclass
class GroupMember:
    identity: IdentityHandle

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GroupMember":
        """Create from API response dict."""
        return cls(identity=IdentityHandle.from_dict(data["identity"]))


@dataclass
class GroupJoinRequest:
    """A pending request to join a group."""

    identity: IdentityHandle
    ts: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GroupJoinRequest":
        """Create from API response dict."""
        return cls(identity=IdentityHandle.from_dict(data["identity"]), ts=data.get("ts"))


@dataclass
class GroupBannedIdentity:
    """An identity banned from a group."""

    identity: IdentityHandle
    ban_ts: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GroupBannedIdentity":
        """Create from API response dict."""
        return cls(identity=IdentityHandle.from_dict(data["identity"]), ban_ts=data.get("ban_ts"))


@dataclass
class GroupProfile(GroupSummary):
    """A full group profile."""

    members: list[GroupMember] = field(default_factory=list)
    join_requests: list[GroupJoinRequest] = field(default_factory=list)
    is_current_identity_requesting_join: bool | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GroupProfile":
        """Create from API response dict."""
        summary = GroupSummary.from_dict(data)
        return cls(
            **summary.__dict__,
            members=[GroupMember.from_dict(m) for m in data.get("members") or []],
            join_requests=[GroupJoinRequest.from_dict(r) for r in data.get("join_requests") or []],
            is_current_identity_requesting_join=data.get("is_current_identity_requesting_join"),
        )


@dataclass
class ListSuggestedRequest:
    watch_index: str | None = None

    def to_params(self) -> dict[str, Any]:
        """Convert to query params."""
        return {"watch_index": self.watch_index}


@dataclass
class ListSuggestedResponse:
    groups: list[GroupSummary] = field(default_factory=list)
    watch: WatchResponse | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ListSuggestedResponse":
        """Create from API response dict."""
        return cls(
            groups=[GroupSummary.from_dict(g) for g in data.get("groups") or []],
            watch=WatchResponse.optional(data.get("watch")),
        )


@dataclass
class CreateGroupRequest:
    display_name: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return {"display_name": self.display_name}


@dataclass
class CreateGroupResponse:
    group_id: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CreateGroupResponse":
        """Create from API response dict."""
        return cls(group_id=data["group_id"])


@dataclass
class UpdateGroupProfileRequest:
    """Group profile fields to update. Unset fields are left unchanged."""

    display_name: str | None = None
    bio: str | None = None
    publicity: GroupPublicity | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _omit_none(
            {
                "display_name": self.display_name,
                "bio": self.bio,
                "publicity": _enum_value(self.publicity),
            }
        )


@dataclass
class ValidateGroupProfileRequest(UpdateGroupProfileRequest):
    """Group profile fields to validate without saving."""


@dataclass
class PageRequest:
    """
    Pagination and watch parameters for list endpoints.

    Attributes:
        anchor: Pagination cursor returned by the previous page
        count: Page size
        watch_index: Watch cursor for long-polling changes

    """

    anchor: str | None = None
    count: float | None = None
    watch_index: str | None = None

    def to_params(self) -> dict[str, Any]:
        """Convert to query params."""
        return {
            "anchor": self.anchor,
            "count": self.count,
            "watch_index": self.watch_index,
        }


@dataclass
class GetBansRequest(PageRequest):
    pass


@dataclass
class GetJoinRequestsRequest(PageRequest):
    pass


@dataclass
class GetMembersRequest(PageRequest):
    pass


@dataclass
class GetBansResponse:
    banned_identities: list[GroupBannedIdentity] = field(default_factory=list)
    anchor: str | None = None
    watch: WatchResponse | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GetBansResponse":
        """Create from API response dict."""
        return cls(
            banned_identities=[GroupBannedIdentity.from_dict(b) for b in data.get("banned_identities") or []],
            anchor=data.get("anchor"),
            watch=WatchResponse.optional(data.get("watch")),
        )


@dataclass
class GetJoinRequestsResponse:
    join_requests: list[GroupJoinRequest] = field(default_factory=list)
    anchor: str | None = None
    watch: WatchResponse | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GetJoinRequestsResponse":
        """Create from API response dict."""
        return cls(
            join_requests=[GroupJoinRequest.from_dict(r) for r in data.get("join_requests") or []],
            anchor=data.get("anchor"),
            watch=WatchResponse.optional(data.get("watch")),
        )


@dataclass
class GetMembersResponse:
    members: list[GroupMember] = field(default_factory=list)
    anchor: str | None = None
    watch: WatchResponse | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GetMembersResponse":
        """Create from API response dict."""
        return cls(
            members=[GroupMember.from_dict(m) for m in data.get("members") or []],
            anchor=data.get("anchor"),
            watch=WatchResponse.optional(data.get("watch")),
        )


@dataclass
class GetGroupProfileRequest:
    watch_index: str | None = None

    def to_params(self) -> dict[str, Any]:
        """Convert to query params."""
        return {"watch_index": self.watch_index}


@dataclass
class GetGroupProfileResponse:
    group: GroupProfile
    watch: WatchResponse | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GetGroupProfileResponse":
        """Create from API response dict."""
        return cls(
            group=GroupProfile.from_dict(data["group"]),
            watch=WatchResponse.optional(data.get("watch")),
        )


@dataclass
class GetGroupSummaryResponse:
    group: GroupSummary

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GetGroupSummaryResponse":
        """Create from API response dict."""
        return cls(group=GroupSummary.from_dict(data["group"]))


@dataclass
class TransferOwnershipRequest:
    new_owner_identity_id: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return {"new_owner_identity_id": str(self.new_owner_identity_id)}


@dataclass
class CreateInviteRequest:
    """
    Invite options.

    Attributes:
        ttl: How long the invite is valid, in milliseconds
        use_count: How many times the invite can be consumed

    """

    ttl: float | None = None
    use_count: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _omit_none({"ttl": self.ttl, "use_count": self.use_count})


@dataclass
class CreateInviteResponse:
    code: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CreateInviteResponse":
        """Create from API response dict."""
        return cls(code=data["code"])


@dataclass
class GetInviteRequest:
    watch_index: str | None = None

    def to_params(self) -> dict[str, Any]:
        """Convert to query params."""
        return {"watch_index": self.watch_index}


@dataclass
class GetInviteResponse:
    group: GroupHandle
    watch: WatchResponse | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GetInviteResponse":
        """Create from API response dict."""
        return cls(
            group=GroupHandle.from_dict(data["group"]),
            watch=WatchResponse.optional(data.get("watch")),
        )


@dataclass
class ConsumeInviteResponse:
    group_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ConsumeInviteResponse":
        """Create from API response dict."""
        return cls(group_id=data.get("group_id"))


@dataclass
class ResolveJoinRequestRequest:
    resolution: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _omit_none({"resolution": self.resolution})


# =============================================================================
# Actor Log Types
# =============================================================================


@dataclass
class GetActorLogsRequest:
    """Query for an actor's logs."""

    stream: LogStream
    project: str | None = None
    environment: str | None = None
    watch_index: str | None = None

    def to_params(self) -> dict[str, Any]:
        """Convert to query params."""
        return {
            "project": self.project,
            "environment": self.environment,
            "stream": self.stream.value,
            "watch_index": self.watch_index,
        }


@dataclass
class GetActorLogsResponse:
    """
    A page of actor log lines.

    `lines` and `timestamps` are parallel, sorted old to new.
    """

    lines: list[str] = field(default_factory=list)
    timestamps: list[str] = field(default_factory=list)
    watch: WatchResponse | None = None

    def __post_init__(self) -> None:
        if len(self.lines) != len(self.timestamps):
            raise ValidationError(
                "Log lines and timestamps differ in length",
                details={"lines": len(self.lines), "timestamps": len(self.timestamps)},
            )

    def __len__(self) -> int:
        return len(self.lines)

    def entries(self) -> Iterator[tuple[str, str]]:
        """Yield (timestamp, line) pairs, old to new."""
        yield from zip(self.timestamps, self.lines)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GetActorLogsResponse":
        """Create from API response dict."""
        return cls(
            lines=list(data.get("lines") or []),
            timestamps=list(data.get("timestamps") or []),
            watch=WatchResponse.optional(data.get("watch")),
        )
