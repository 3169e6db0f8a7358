"""End-to-end tests for the resource clients against a fake transport."""

import uuid

import pytest

from rivet_api.core.errors import APIError, BadRequestError, NotFoundError, UnauthorizedError
from rivet_api.core.types import (
    CompleteEmailVerificationRequest,
    CompleteStatus,
    CreateGroupRequest,
    CreateInviteRequest,
    GameActivity,
    GetActorLogsRequest,
    GetBansRequest,
    GetGroupProfileRequest,
    GetIdentityProfileRequest,
    GetMembersRequest,
    GroupPublicity,
    IdentityStatus,
    LogStream,
    PrepareAvatarUploadRequest,
    ResolveJoinRequestRequest,
    SetGameActivityRequest,
    SignupForBetaRequest,
    StartEmailVerificationRequest,
    TransferOwnershipRequest,
    UpdateGroupProfileRequest,
    UpdateIdentityProfileRequest,
    UpdateStatusRequest,
    ValidateGroupProfileRequest,
)

BASE_URL = "https://api.test.rivet.gg"
GROUP_ID = "0f6b8c2e-3d1a-4c5b-9e7f-1a2b3c4d5e6f"
IDENTITY_ID = "5a4b3c2d-1e0f-4a9b-8c7d-6e5f4a3b2c1d"

IDENTITY = {
    "identity_id": IDENTITY_ID,
    "display_name": "Ana",
    "account_number": 42,
    "avatar_url": "https://cdn.rivet.gg/avatar.png",
    "is_registered": True,
    "external": {"profile": "https://rivet.gg/identities/ana"},
}

GROUP_SUMMARY = {
    "group_id": GROUP_ID,
    "display_name": "Team",
    "bio": "We make games",
    "is_developer": True,
    "is_current_identity_member": True,
    "publicity": "open",
    "member_count": 3,
    "owner_identity_id": IDENTITY_ID,
    "external": {"profile": "https://rivet.gg/groups/team"},
}

NOT_FOUND = {"code": "GROUP_NOT_FOUND", "message": "Group not found.", "ray_id": "ray-1"}


class TestGroup:
    def test_get_profile_with_watch_index(self, client, transport):
        transport.reply(200, {"group": {**GROUP_SUMMARY, "members": []}, "watch": {"index": "1700"}})

        response = client.group.get_profile(GROUP_ID, GetGroupProfileRequest(watch_index="1699"))

        assert transport.last.method == "GET"
        assert transport.last.url == f"{BASE_URL}/group/groups/{GROUP_ID}/profile?watch_index=1699"
        assert response.group.display_name == "Team"
        assert response.watch.index == "1700"

    def test_get_profile_without_watch_index(self, client, transport):
        transport.reply(200, {"group": GROUP_SUMMARY})

        client.group.get_profile(uuid.UUID(GROUP_ID))

        assert transport.last.url == f"{BASE_URL}/group/groups/{GROUP_ID}/profile"

    def test_get_profile_not_found(self, client, transport):
        transport.reply(404, NOT_FOUND)

        with pytest.raises(NotFoundError) as exc_info:
            client.group.get_profile(GROUP_ID)

        assert exc_info.value.code == "GROUP_NOT_FOUND"
        assert exc_info.value.status == 404

    def test_create(self, client, transport):
        transport.reply(200, {"group_id": GROUP_ID})

        response = client.group.create(CreateGroupRequest(display_name="Team"))

        assert transport.last.method == "POST"
        assert transport.last.url == f"{BASE_URL}/group/groups"
        assert transport.last.body == {"display_name": "Team"}
        assert response.group_id == GROUP_ID

    def test_create_bad_request(self, client, transport):
        transport.reply(400, {"code": "GROUP_INVALID", "message": "Invalid name.", "ray_id": "r"})

        with pytest.raises(BadRequestError):
            client.group.create(CreateGroupRequest(display_name=""))

    def test_create_unauthorized_status(self, client, transport):
        transport.reply(408, {"code": "TOKEN_INVALID", "message": "Invalid token.", "ray_id": "r"})

        with pytest.raises(UnauthorizedError):
            client.group.create(CreateGroupRequest(display_name="Team"))

    def test_list_suggested(self, client, transport):
        transport.reply(200, {"groups": [GROUP_SUMMARY], "watch": {"index": "9"}})

        response = client.group.list_suggested()

        assert transport.last.url == f"{BASE_URL}/group/groups"
        assert response.groups[0].publicity is GroupPublicity.OPEN
        assert response.groups[0].member_count == 3

    def test_get_bans_pagination(self, client, transport):
        transport.reply(
            200,
            {
                "banned_identities": [{"identity": IDENTITY, "ban_ts": "2024-01-01T00:00:00Z"}],
                "anchor": "next",
                "watch": {"index": "3"},
            },
        )

        response = client.group.get_bans(GROUP_ID, GetBansRequest(anchor="a1", count=10))

        assert transport.last.url == f"{BASE_URL}/group/groups/{GROUP_ID}/bans?anchor=a1&count=10"
        assert response.banned_identities[0].identity.display_name == "Ana"
        assert response.anchor == "next"

    def test_get_bans_whole_float_count(self, client, transport):
        transport.reply(200, {"banned_identities": [], "watch": {"index": "3"}})

        client.group.get_bans(GROUP_ID, GetBansRequest(count=10.0))

        assert transport.last.url == f"{BASE_URL}/group/groups/{GROUP_ID}/bans?count=10"

    def test_get_members(self, client, transport):
        transport.reply(200, {"members": [{"identity": IDENTITY}], "watch": {"index": "3"}})

        response = client.group.get_members(GROUP_ID, GetMembersRequest(watch_index="2"))

        assert transport.last.url == f"{BASE_URL}/group/groups/{GROUP_ID}/members?watch_index=2"
        assert response.members[0].identity.account_number == 42
        assert response.anchor is None

    def test_get_join_requests(self, client, transport):
        transport.reply(200, {"join_requests": [{"identity": IDENTITY, "ts": "2024-01-01T00:00:00Z"}]})

        response = client.group.get_join_requests(GROUP_ID)

        assert transport.last.url == f"{BASE_URL}/group/groups/{GROUP_ID}/join-requests"
        assert response.join_requests[0].ts == "2024-01-01T00:00:00Z"
        assert response.watch is None

    def test_get_summary(self, client, transport):
        transport.reply(200, {"group": GROUP_SUMMARY})

        response = client.group.get_summary(GROUP_ID)

        assert transport.last.url == f"{BASE_URL}/group/groups/{GROUP_ID}/summary"
        assert response.group.owner_identity_id == IDENTITY_ID

    @pytest.mark.parametrize(
        "call,method,path",
        [
            (lambda g: g.ban_identity(GROUP_ID, IDENTITY_ID), "POST", f"group/groups/{GROUP_ID}/bans/{IDENTITY_ID}"),
            (lambda g: g.unban_identity(GROUP_ID, IDENTITY_ID), "DELETE", f"group/groups/{GROUP_ID}/bans/{IDENTITY_ID}"),
            (lambda g: g.kick_member(GROUP_ID, IDENTITY_ID), "POST", f"group/groups/{GROUP_ID}/kick/{IDENTITY_ID}"),
            (lambda g: g.leave(GROUP_ID), "POST", f"group/groups/{GROUP_ID}/leave"),
            (
                lambda g: g.complete_avatar_upload(GROUP_ID, "up-1"),
                "POST",
                f"group/groups/{GROUP_ID}/avatar-upload/up-1/complete",
            ),
        ],
    )
    def test_operations_without_response(self, client, transport, call, method, path):
        transport.reply(200, {})

        assert call(client.group) is None
        assert transport.last.method == method
        assert transport.last.url == f"{BASE_URL}/{path}"
        assert transport.last.body is None

    def test_update_profile(self, client, transport):
        transport.reply(200, {})

        client.group.update_profile(GROUP_ID, UpdateGroupProfileRequest(bio="New bio", publicity=GroupPublicity.CLOSED))

        assert transport.last.url == f"{BASE_URL}/group/groups/{GROUP_ID}/profile"
        assert transport.last.body == {"bio": "New bio", "publicity": "closed"}

    def test_validate_profile(self, client, transport):
        transport.reply(200, {"errors": [{"path": ["display_name", "too-long"]}]})

        response = client.group.validate_profile(ValidateGroupProfileRequest(display_name="x" * 100))

        assert transport.last.url == f"{BASE_URL}/group/groups/profile/validate"
        assert not response.is_valid

    def test_prepare_avatar_upload(self, client, transport):
        transport.reply(
            200,
            {"upload_id": "up-1", "presigned_request": {"path": "avatar.png", "url": "https://upload.example.com"}},
        )

        response = client.group.prepare_avatar_upload(
            PrepareAvatarUploadRequest(path="avatar.png", content_length=1024, mime="image/png")
        )

        assert transport.last.url == f"{BASE_URL}/group/groups/avatar-upload/prepare"
        assert transport.last.body == {"path": "avatar.png", "mime": "image/png", "content_length": 1024}
        assert response.presigned_request.url == "https://upload.example.com"

    def test_transfer_ownership(self, client, transport):
        transport.reply(200, {})

        client.group.transfer_ownership(GROUP_ID, TransferOwnershipRequest(new_owner_identity_id=IDENTITY_ID))

        assert transport.last.url == f"{BASE_URL}/group/groups/{GROUP_ID}/transfer-owner"
        assert transport.last.body == {"new_owner_identity_id": IDENTITY_ID}

    def test_server_error_with_plain_body_is_generic(self, client, transport):
        transport.reply(500, "upstream exploded")

        with pytest.raises(APIError) as exc_info:
            client.group.get_summary(GROUP_ID)

        assert type(exc_info.value) is APIError
        assert exc_info.value.status == 500
        assert exc_info.value.body == "upstream exploded"


class TestGroupInvites:
    def test_create_invite(self, client, transport):
        transport.reply(200, {"code": "abc123"})

        response = client.group.invites.create_invite(GROUP_ID, CreateInviteRequest(ttl=3600000, use_count=5))

        assert transport.last.url == f"{BASE_URL}/group/groups/{GROUP_ID}/invites"
        assert transport.last.body == {"ttl": 3600000, "use_count": 5}
        assert response.code == "abc123"

    def test_get_invite(self, client, transport):
        transport.reply(200, {"group": {"group_id": GROUP_ID, "display_name": "Team"}, "watch": {"index": "1"}})

        response = client.group.invites.get_invite("abc123")

        assert transport.last.url == f"{BASE_URL}/group/invites/abc123"
        assert response.group.group_id == GROUP_ID

    def test_consume_invite(self, client, transport):
        transport.reply(200, {"group_id": GROUP_ID})

        response = client.group.invites.consume_invite("abc123")

        assert transport.last.method == "POST"
        assert transport.last.url == f"{BASE_URL}/group/invites/abc123/consume"
        assert response.group_id == GROUP_ID


class TestGroupJoinRequests:
    def test_create_join_request(self, client, transport):
        transport.reply(200, {})

        client.group.join_requests.create_join_request(GROUP_ID)

        assert transport.last.url == f"{BASE_URL}/group/groups/{GROUP_ID}/join-request"

    def test_resolve_join_request(self, client, transport):
        transport.reply(200, {})

        client.group.join_requests.resolve_join_request(GROUP_ID, IDENTITY_ID, ResolveJoinRequestRequest(resolution=True))

        assert transport.last.url == f"{BASE_URL}/group/groups/{GROUP_ID}/join-request/{IDENTITY_ID}"
        assert transport.last.body == {"resolution": True}


class TestIdentity:
    def test_setup(self, client, transport):
        transport.reply(
            200,
            {
                "identity_token": "tok",
                "identity_token_expire_ts": "2024-02-01T00:00:00Z",
                "identity": {**IDENTITY, "bio": "hi"},
                "game_id": "game-1",
            },
        )

        response = client.identity.setup()

        assert transport.last.url == f"{BASE_URL}/identity/identities"
        assert transport.last.body == {}
        assert response.identity_token == "tok"
        assert response.identity.bio == "hi"

    def test_get_profile_with_watch_index(self, client, transport):
        transport.reply(200, {"identity": IDENTITY, "watch": {"index": "11"}})

        response = client.identity.get_profile(IDENTITY_ID, GetIdentityProfileRequest(watch_index="10"))

        assert transport.last.url == f"{BASE_URL}/identity/identities/{IDENTITY_ID}/profile?watch_index=10"
        assert response.identity.identity_id == IDENTITY_ID

    def test_get_self_profile(self, client, transport):
        transport.reply(200, {"identity": IDENTITY})

        client.identity.get_self_profile()

        assert transport.last.url == f"{BASE_URL}/identity/identities/self/profile"

    def test_get_handles(self, client, transport):
        transport.reply(200, {"identities": [IDENTITY]})

        response = client.identity.get_handles([IDENTITY_ID, "other"])

        assert transport.last.url == f"{BASE_URL}/identity/identities/batch/handle?identity_ids={IDENTITY_ID}%2Cother"
        assert response.identities[0].is_registered

    def test_get_summaries(self, client, transport):
        transport.reply(200, {"identities": [{**IDENTITY, "is_mutual_following": True}]})

        response = client.identity.get_summaries([IDENTITY_ID])

        assert transport.last.url == f"{BASE_URL}/identity/identities/batch/summary?identity_ids={IDENTITY_ID}"
        assert response.identities[0].is_mutual_following

    def test_update_and_validate_profile(self, client, transport):
        transport.reply(200, {})
        transport.reply(200, {"errors": []})

        request = UpdateIdentityProfileRequest(display_name="Ana", account_number=7)
        client.identity.update_profile(request)
        response = client.identity.validate_profile(request)

        first, second = transport.requests
        assert first.url == f"{BASE_URL}/identity/identities/self/profile"
        assert first.body == {"display_name": "Ana", "account_number": 7}
        assert second.url == f"{BASE_URL}/identity/identities/self/profile/validate"
        assert response.is_valid

    def test_game_activity(self, client, transport):
        transport.reply(200, {})
        transport.reply(200, {})

        client.identity.set_game_activity(SetGameActivityRequest(GameActivity(message="Playing")))
        client.identity.remove_game_activity()

        first, second = transport.requests
        assert (first.method, first.body) == ("POST", {"game_activity": {"message": "Playing"}})
        assert second.method == "DELETE"
        assert second.url == f"{BASE_URL}/identity/identities/self/activity"

    def test_update_status(self, client, transport):
        transport.reply(200, {})

        client.identity.update_status(UpdateStatusRequest(status=IdentityStatus.ONLINE))

        assert transport.last.url == f"{BASE_URL}/identity/identities/identities/self/status"
        assert transport.last.body == {"status": "online"}

    def test_signup_for_beta(self, client, transport):
        transport.reply(200, {})

        client.identity.signup_for_beta(
            SignupForBetaRequest(name="Ana", company_size="1-10", preferred_tools="Godot", goals="Ship")
        )

        assert transport.last.url == f"{BASE_URL}/identity/identities/self/beta-signup"
        assert "company_name" not in transport.last.body

    def test_avatar_upload(self, client, transport):
        transport.reply(200, {"upload_id": "up-2", "presigned_request": {"path": "a.png", "url": "https://u"}})
        transport.reply(200, {})

        response = client.identity.prepare_avatar_upload(PrepareAvatarUploadRequest(path="a.png", content_length=10))
        client.identity.complete_avatar_upload(response.upload_id)

        assert transport.requests[0].url == f"{BASE_URL}/identity/identities/avatar-upload/prepare"
        assert transport.requests[1].url == f"{BASE_URL}/identity/identities/avatar-upload/up-2/complete"

    def test_deletion(self, client, transport):
        transport.reply(200, {})
        transport.reply(200, {})

        client.identity.mark_deletion()
        client.identity.unmark_deletion()

        assert [r.method for r in transport.requests] == ["POST", "DELETE"]
        assert {r.url for r in transport.requests} == {f"{BASE_URL}/identity/identities/self/delete-request"}


class TestIdentityEmailAuth:
    def test_start_email_verification(self, client, transport):
        transport.reply(200, {"verification_id": "ver-1"})

        response = client.auth.identity.email.start_email_verification(
            StartEmailVerificationRequest(email="ana@example.com")
        )

        assert transport.last.url == f"{BASE_URL}/auth/identity/email/start-verification"
        assert transport.last.body == {"email": "ana@example.com"}
        assert response.verification_id == "ver-1"

    def test_complete_email_verification(self, client, transport):
        transport.reply(200, {"status": "switch_identity"})

        response = client.auth.identity.email.complete_email_verification(
            CompleteEmailVerificationRequest(verification_id="ver-1", code="123456")
        )

        assert transport.last.url == f"{BASE_URL}/auth/identity/email/complete-verification"
        assert transport.last.body == {"verification_id": "ver-1", "code": "123456"}
        assert response.status is CompleteStatus.SWITCH_IDENTITY


class TestActorLogs:
    def test_get_logs(self, client, transport):
        transport.reply(
            200,
            {
                "lines": ["one", "two", "three"],
                "timestamps": ["2024-01-01T00:00:00Z", "2024-01-01T00:00:01Z", "2024-01-01T00:00:02Z"],
                "watch": {"index": "1704067202000"},
            },
        )

        response = client.actors.logs.get(
            "actor-1",
            GetActorLogsRequest(stream=LogStream.STD_OUT, project="proj", environment="prod", watch_index="5"),
        )

        assert transport.last.url == (
            f"{BASE_URL}/actors/actor-1/logs?project=proj&environment=prod&stream=std_out&watch_index=5"
        )
        assert [line for _, line in response.entries()] == ["one", "two", "three"]
        assert response.watch.index == "1704067202000"

    def test_get_logs_forbidden(self, client, transport):
        transport.reply(403, {"code": "FORBIDDEN", "message": "No access.", "ray_id": "r"})

        with pytest.raises(APIError) as exc_info:
            client.actors.logs.get("actor-1", GetActorLogsRequest(stream=LogStream.STD_ERR))

        assert exc_info.value.status == 403
        assert exc_info.value.code == "FORBIDDEN"
