"""
Rivet SDK - High-level client with one operations object per API resource.

Built on top of the core APIClient. Every method issues exactly one request
and returns a typed response (or None), raising the typed errors from
rivet_api.core.errors on failure.
"""

import uuid
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from rivet_api.core.client import DEFAULT_TIMEOUT, APIClient, ClientOptions, path_param
from rivet_api.core.types import (
    CompleteEmailVerificationRequest,
    CompleteEmailVerificationResponse,
    ConsumeInviteResponse,
    CreateGroupRequest,
    CreateGroupResponse,
    CreateInviteRequest,
    CreateInviteResponse,
    GetActorLogsRequest,
    GetActorLogsResponse,
    GetBansRequest,
    GetBansResponse,
    GetGroupProfileRequest,
    GetGroupProfileResponse,
    GetGroupSummaryResponse,
    GetHandlesResponse,
    GetIdentityProfileRequest,
    GetIdentityProfileResponse,
    GetInviteRequest,
    GetInviteResponse,
    GetJoinRequestsRequest,
    GetJoinRequestsResponse,
    GetMembersRequest,
    GetMembersResponse,
    GetSummariesResponse,
    ListSuggestedRequest,
    ListSuggestedResponse,
    PrepareAvatarUploadRequest,
    PrepareAvatarUploadResponse,
    ResolveJoinRequestRequest,
    SetGameActivityRequest,
    SetupIdentityRequest,
    SetupIdentityResponse,
    SignupForBetaRequest,
    StartEmailVerificationRequest,
    StartEmailVerificationResponse,
    TransferOwnershipRequest,
    UpdateGroupProfileRequest,
    UpdateIdentityProfileRequest,
    UpdateStatusRequest,
    ValidateGroupProfileRequest,
    ValidateProfileResponse,
)

Identifier = str | uuid.UUID


class RivetClient:
    """
    High-level Rivet API client with typed methods.

    Example:
        client = RivetClient(token="...")

        # Fetch a group and watch it for changes
        profile = client.group.get_profile(group_id)
        profile = client.group.get_profile(
            group_id, GetGroupProfileRequest(watch_index=profile.watch.index)
        )

        # Tail actor logs
        logs = client.actors.logs.get(actor_id, GetActorLogsRequest(stream=LogStream.STD_OUT))

    """

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        opener: Callable[..., Any] | None = None,
        options: ClientOptions | None = None,
    ):
        """
        Initialize the Rivet client.

        Args:
            token: API token (or RIVET_TOKEN env var)
            base_url: API base URL (or RIVET_API_URL env var)
            headers: Extra headers sent with every request
            timeout: Request timeout in seconds
            opener: Transport override with the urllib.request.urlopen signature
            options: Prebuilt options; when given the other arguments are ignored

        """
        self.options = options or ClientOptions.from_env(
            token=token,
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            opener=opener,
        )
        self._client = APIClient(self.options)

        # Sub-clients for each resource
        self.group = GroupOperations(self._client)
        self.identity = IdentityOperations(self._client)
        self.auth = AuthOperations(self._client)
        self.actors = ActorOperations(self._client)

    @property
    def base_url(self) -> str:
        """Get the configured API base URL."""
        return self.options.base_url


# =============================================================================
# Group Operations
# =============================================================================


class GroupOperations:
    """Operations for groups, their members, bans and profiles."""

    def __init__(self, client: APIClient):
        self._client = client

        self.invites = GroupInviteOperations(client)
        self.join_requests = GroupJoinRequestOperations(client)

    def list_suggested(self, request: ListSuggestedRequest | None = None) -> ListSuggestedResponse:
        """
        Returns a list of suggested groups.

        Args:
            request: Optional watch index

        Returns:
            ListSuggestedResponse with group summaries

        """
        request = request or ListSuggestedRequest()
        return self._client.get("group/groups", request.to_params(), parser=ListSuggestedResponse.from_dict)

    def create(self, request: CreateGroupRequest) -> CreateGroupResponse:
        """
        Creates a new group.

        Args:
            request: Group display name

        Returns:
            CreateGroupResponse with the new group ID

        """
        return self._client.post("group/groups", request.to_dict(), parser=CreateGroupResponse.from_dict)

    def prepare_avatar_upload(self, request: PrepareAvatarUploadRequest) -> PrepareAvatarUploadResponse:
        """
        Prepares an avatar image upload.

        Complete the upload with complete_avatar_upload() once the file has
        been sent to the presigned URL.
        """
        return self._client.post(
            "group/groups/avatar-upload/prepare",
            request.to_dict(),
            parser=PrepareAvatarUploadResponse.from_dict,
        )

    def validate_profile(self, request: ValidateGroupProfileRequest) -> ValidateProfileResponse:
        """Validates information used to create a new group or update an existing one."""
        return self._client.post(
            "group/groups/profile/validate",
            request.to_dict(),
            parser=ValidateProfileResponse.from_dict,
        )

    def complete_avatar_upload(self, group_id: Identifier, upload_id: Identifier) -> None:
        """Completes an avatar image upload. Must be called after the file upload process completes."""
        self._client.post(f"group/groups/{path_param(group_id)}/avatar-upload/{path_param(upload_id)}/complete")

    def get_bans(self, group_id: Identifier, request: GetBansRequest | None = None) -> GetBansResponse:
        """
        Returns a group's bans. Must have valid permissions to view.

        Args:
            group_id: Group ID
            request: Optional anchor, count and watch index

        Returns:
            GetBansResponse with banned identities and the next anchor

        """
        request = request or GetBansRequest()
        return self._client.get(
            f"group/groups/{path_param(group_id)}/bans",
            request.to_params(),
            parser=GetBansResponse.from_dict,
        )

    def ban_identity(self, group_id: Identifier, identity_id: Identifier) -> None:
        """Bans an identity from a group. Must be the owner of the group to perform this action."""
        self._client.post(f"group/groups/{path_param(group_id)}/bans/{path_param(identity_id)}")

    def unban_identity(self, group_id: Identifier, identity_id: Identifier) -> None:
        """Unbans an identity from a group. Must be the owner of the group to perform this action."""
        self._client.delete(f"group/groups/{path_param(group_id)}/bans/{path_param(identity_id)}")

    def get_join_requests(
        self,
        group_id: Identifier,
        request: GetJoinRequestsRequest | None = None,
    ) -> GetJoinRequestsResponse:
        """Returns a group's join requests. Must have valid permissions to view."""
        request = request or GetJoinRequestsRequest()
        return self._client.get(
            f"group/groups/{path_param(group_id)}/join-requests",
            request.to_params(),
            parser=GetJoinRequestsResponse.from_dict,
        )

    def kick_member(self, group_id: Identifier, identity_id: Identifier) -> None:
        """Kicks an identity from a group. Must be the owner of the group to perform this action."""
        self._client.post(f"group/groups/{path_param(group_id)}/kick/{path_param(identity_id)}")

    def leave(self, group_id: Identifier) -> None:
        """Leaves a group."""
        self._client.post(f"group/groups/{path_param(group_id)}/leave")

    def get_members(self, group_id: Identifier, request: GetMembersRequest | None = None) -> GetMembersResponse:
        """Returns a group's members."""
        request = request or GetMembersRequest()
        return self._client.get(
            f"group/groups/{path_param(group_id)}/members",
            request.to_params(),
            parser=GetMembersResponse.from_dict,
        )

    def get_profile(
        self,
        group_id: Identifier,
        request: GetGroupProfileRequest | None = None,
    ) -> GetGroupProfileResponse:
        """
        Returns a group profile.

        Args:
            group_id: Group ID
            request: Optional watch index; with one set the call blocks until the profile changes

        Returns:
            GetGroupProfileResponse with the profile and a new watch cursor

        """
        request = request or GetGroupProfileRequest()
        return self._client.get(
            f"group/groups/{path_param(group_id)}/profile",
            request.to_params(),
            parser=GetGroupProfileResponse.from_dict,
        )

    def update_profile(self, group_id: Identifier, request: UpdateGroupProfileRequest) -> None:
        """Updates a group's profile."""
        self._client.post(f"group/groups/{path_param(group_id)}/profile", request.to_dict())

    def get_summary(self, group_id: Identifier) -> GetGroupSummaryResponse:
        """Returns a group summary."""
        return self._client.get(
            f"group/groups/{path_param(group_id)}/summary",
            parser=GetGroupSummaryResponse.from_dict,
        )

    def transfer_ownership(self, group_id: Identifier, request: TransferOwnershipRequest) -> None:
        """Transfers ownership of a group to another identity."""
        self._client.post(f"group/groups/{path_param(group_id)}/transfer-owner", request.to_dict())


class GroupInviteOperations:
    """Operations for group invites."""

    def __init__(self, client: APIClient):
        self._client = client

    def create_invite(self, group_id: Identifier, request: CreateInviteRequest | None = None) -> CreateInviteResponse:
        """Creates a group invite. Can be shared with other identities to let them join this group."""
        request = request or CreateInviteRequest()
        return self._client.post(
            f"group/groups/{path_param(group_id)}/invites",
            request.to_dict(),
            parser=CreateInviteResponse.from_dict,
        )

    def get_invite(self, group_invite_code: str, request: GetInviteRequest | None = None) -> GetInviteResponse:
        """Inspects a group invite returning information about the team that created it."""
        request = request or GetInviteRequest()
        return self._client.get(
            f"group/invites/{path_param(group_invite_code)}",
            request.to_params(),
            parser=GetInviteResponse.from_dict,
        )

    def consume_invite(self, group_invite_code: str) -> ConsumeInviteResponse:
        """Consumes a group invite to join a group."""
        return self._client.post(
            f"group/invites/{path_param(group_invite_code)}/consume",
            parser=ConsumeInviteResponse.from_dict,
        )


class GroupJoinRequestOperations:
    """Operations for requests to join a group."""

    def __init__(self, client: APIClient):
        self._client = client

    def create_join_request(self, group_id: Identifier) -> None:
        """Requests to join a group."""
        self._client.post(f"group/groups/{path_param(group_id)}/join-request")

    def resolve_join_request(
        self,
        group_id: Identifier,
        identity_id: Identifier,
        request: ResolveJoinRequestRequest,
    ) -> None:
        """Resolves a join request for a given group."""
        self._client.post(
            f"group/groups/{path_param(group_id)}/join-request/{path_param(identity_id)}",
            request.to_dict(),
        )


# =============================================================================
# Identity Operations
# =============================================================================


class IdentityOperations:
    """Operations for identities and their profiles."""

    def __init__(self, client: APIClient):
        self._client = client

    def setup(self, request: SetupIdentityRequest | None = None) -> SetupIdentityResponse:
        """
        Gets or creates an identity.

        Passing an existing identity token in the body refreshes the token.

        Args:
            request: Optional existing identity token

        Returns:
            SetupIdentityResponse with a fresh identity token and profile

        """
        request = request or SetupIdentityRequest()
        return self._client.post("identity/identities", request.to_dict(), parser=SetupIdentityResponse.from_dict)

    def get_profile(
        self,
        identity_id: Identifier,
        request: GetIdentityProfileRequest | None = None,
    ) -> GetIdentityProfileResponse:
        """Fetches an identity profile."""
        request = request or GetIdentityProfileRequest()
        return self._client.get(
            f"identity/identities/{path_param(identity_id)}/profile",
            request.to_params(),
            parser=GetIdentityProfileResponse.from_dict,
        )

    def get_self_profile(self, request: GetIdentityProfileRequest | None = None) -> GetIdentityProfileResponse:
        """Fetches the current identity's profile."""
        request = request or GetIdentityProfileRequest()
        return self._client.get(
            "identity/identities/self/profile",
            request.to_params(),
            parser=GetIdentityProfileResponse.from_dict,
        )

    def get_handles(self, identity_ids: Iterable[Identifier]) -> GetHandlesResponse:
        """Fetches a list of identity handles."""
        return self._client.get(
            "identity/identities/batch/handle",
            {"identity_ids": [str(i) for i in identity_ids]},
            parser=GetHandlesResponse.from_dict,
        )

    def get_summaries(self, identity_ids: Iterable[Identifier]) -> GetSummariesResponse:
        """Fetches a list of identity summaries."""
        return self._client.get(
            "identity/identities/batch/summary",
            {"identity_ids": [str(i) for i in identity_ids]},
            parser=GetSummariesResponse.from_dict,
        )

    def update_profile(self, request: UpdateIdentityProfileRequest) -> None:
        """Updates profile of the current identity."""
        self._client.post("identity/identities/self/profile", request.to_dict())

    def validate_profile(self, request: UpdateIdentityProfileRequest) -> ValidateProfileResponse:
        """Validates information used to update an identity's profile."""
        return self._client.post(
            "identity/identities/self/profile/validate",
            request.to_dict(),
            parser=ValidateProfileResponse.from_dict,
        )

    def set_game_activity(self, request: SetGameActivityRequest) -> None:
        """Sets the current identity's game activity. This activity will automatically be removed when the identity goes offline."""
        self._client.post("identity/identities/self/activity", request.to_dict())

    def remove_game_activity(self) -> None:
        """Removes the current identity's game activity."""
        self._client.delete("identity/identities/self/activity")

    def update_status(self, request: UpdateStatusRequest) -> None:
        """Updates the current identity's status."""
        self._client.post("identity/identities/identities/self/status", request.to_dict())

    def signup_for_beta(self, request: SignupForBetaRequest) -> None:
        """Completes an identity's beta signup form."""
        self._client.post("identity/identities/self/beta-signup", request.to_dict())

    def prepare_avatar_upload(self, request: PrepareAvatarUploadRequest) -> PrepareAvatarUploadResponse:
        """Prepares an avatar image upload. Complete upload with complete_avatar_upload()."""
        return self._client.post(
            "identity/identities/avatar-upload/prepare",
            request.to_dict(),
            parser=PrepareAvatarUploadResponse.from_dict,
        )

    def complete_avatar_upload(self, upload_id: Identifier) -> None:
        """Completes an avatar image upload. Must be called after the file upload process completes."""
        self._client.post(f"identity/identities/avatar-upload/{path_param(upload_id)}/complete")

    def mark_deletion(self) -> None:
        """Marks the current identity for deletion."""
        self._client.post("identity/identities/self/delete-request")

    def unmark_deletion(self) -> None:
        """Cancels a pending deletion of the current identity."""
        self._client.delete("identity/identities/self/delete-request")


# =============================================================================
# Auth Operations
# =============================================================================


class AuthOperations:
    """Authentication resources."""

    def __init__(self, client: APIClient):
        self._client = client

        self.identity = AuthIdentityOperations(client)


class AuthIdentityOperations:
    """Identity authentication methods."""

    def __init__(self, client: APIClient):
        self._client = client

        self.email = IdentityEmailOperations(client)


class IdentityEmailOperations:
    """Email verification for linking an email to the current identity."""

    def __init__(self, client: APIClient):
        self._client = client

    def start_email_verification(self, request: StartEmailVerificationRequest) -> StartEmailVerificationResponse:
        """
        Starts the verification process for linking an email to your identity.

        Args:
            request: Email address plus optional captcha and game ID

        Returns:
            StartEmailVerificationResponse with the verification ID to complete with

        """
        return self._client.post(
            "auth/identity/email/start-verification",
            request.to_dict(),
            parser=StartEmailVerificationResponse.from_dict,
        )

    def complete_email_verification(
        self,
        request: CompleteEmailVerificationRequest,
    ) -> CompleteEmailVerificationResponse:
        """Completes the email verification process."""
        return self._client.post(
            "auth/identity/email/complete-verification",
            request.to_dict(),
            parser=CompleteEmailVerificationResponse.from_dict,
        )


# =============================================================================
# Actor Operations
# =============================================================================


class ActorOperations:
    """Actor resources."""

    def __init__(self, client: APIClient):
        self._client = client

        self.logs = ActorLogOperations(client)


class ActorLogOperations:
    """Operations for reading actor logs."""

    def __init__(self, client: APIClient):
        self._client = client

    def get(self, actor_id: Identifier, request: GetActorLogsRequest) -> GetActorLogsResponse:
        """
        Returns the logs for a given actor.

        Args:
            actor_id: Actor ID
            request: Stream to read plus optional project, environment and watch index

        Returns:
            GetActorLogsResponse with parallel lines and timestamps, old to new

        """
        return self._client.get(
            f"actors/{path_param(actor_id)}/logs",
            request.to_params(),
            parser=GetActorLogsResponse.from_dict,
        )
