"""Tests for bruhbot/permissions/requirements.py"""

from datetime import datetime, timedelta, timezone

import hikari
import pytest

from bruhbot.permissions.requirements import (
    AllRequirements,
    AnyRequirements,
    ChannelNameRequirement,
    ChannelTypeRequirement,
    ContextValueRequirement,
    IdentityRequirement,
    MemberRoleRequirement,
    NameMatch,
    NoPermission,
    RoleRequirement,
    TimestampField,
    TimeWindowRequirement,
    evaluate,
)

SENT_AT = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

PASS = NoPermission()
FAIL = AnyRequirements()


class TestCombinators:
    """Test all-of / any-of semantics."""

    def test_no_permission_always_passes(self, make_context):
        assert evaluate(NoPermission(), make_context())

    def test_empty_all_passes(self, make_context):
        assert evaluate(AllRequirements(), make_context())

    def test_empty_any_fails(self, make_context):
        assert not evaluate(AnyRequirements(), make_context())

    @pytest.mark.parametrize(
        "children,expected",
        [
            ([PASS], True),
            ([FAIL], False),
            ([PASS, FAIL], False),
            ([PASS, AllRequirements()], True),
        ],
    )
    def test_all_requirements(self, make_context, children, expected):
        assert evaluate(AllRequirements(children), make_context()) is expected

    @pytest.mark.parametrize(
        "children,expected",
        [
            ([PASS], True),
            ([FAIL], False),
            ([PASS, FAIL], True),
            ([FAIL, AnyRequirements([FAIL])], False),
        ],
    )
    def test_any_requirements(self, make_context, children, expected):
        assert evaluate(AnyRequirements(children), make_context()) is expected

    def test_operators(self, make_context):
        context = make_context()

        assert (PASS | FAIL).check(context)
        assert not (PASS & FAIL).check(context)
        assert isinstance(PASS & FAIL, AllRequirements)
        assert isinstance(PASS | FAIL, AnyRequirements)

    def test_requirements_are_hashable(self):
        nested = AllRequirements([RoleRequirement.admin(), AnyRequirements([IdentityRequirement(user_id=1)])])

        assert nested == AllRequirements([AnyRequirements([IdentityRequirement(user_id=1)]), RoleRequirement.admin()])
        assert hash(nested) == hash(AllRequirements(list(nested.requirements)))

    def test_unknown_requirement(self, make_context):
        with pytest.raises(TypeError):
            evaluate(object(), make_context())


class TestRoleRequirements:
    """Test guild permission and role requirements."""

    def test_admin_passes_for_administrators(self, make_context):
        context = make_context(permissions=hikari.Permissions.ADMINISTRATOR | hikari.Permissions.SEND_MESSAGES)

        assert RoleRequirement.admin().check(context)

    def test_admin_fails_without_permission(self, make_context):
        context = make_context(permissions=hikari.Permissions.SEND_MESSAGES)

        assert not RoleRequirement.admin().check(context)

    def test_all_of_permissions(self, make_context):
        requirement = RoleRequirement.all_of([hikari.Permissions.KICK_MEMBERS, hikari.Permissions.BAN_MEMBERS])

        assert requirement.check(
            make_context(permissions=hikari.Permissions.KICK_MEMBERS | hikari.Permissions.BAN_MEMBERS)
        )
        assert not requirement.check(make_context(permissions=hikari.Permissions.KICK_MEMBERS))

    def test_any_of_permissions(self, make_context):
        requirement = RoleRequirement.any_of([hikari.Permissions.KICK_MEMBERS, hikari.Permissions.BAN_MEMBERS])

        assert requirement.check(make_context(permissions=hikari.Permissions.BAN_MEMBERS))
        assert not requirement.check(make_context(permissions=hikari.Permissions.SEND_MESSAGES))

    def test_member_role(self, make_context):
        requirement = MemberRoleRequirement(555)

        assert requirement.check(make_context(role_ids=frozenset({1, 555})))
        assert not requirement.check(make_context(role_ids=frozenset({1})))


class TestIdentityRequirement:
    """Test user, guild and channel restrictions."""

    def test_user_match(self, make_context):
        assert IdentityRequirement(user_id=111111111).check(make_context())
        assert not IdentityRequirement(user_id=42).check(make_context())

    def test_all_given_ids_must_match(self, make_context):
        requirement = IdentityRequirement(guild_id=123456789, channel_id=1)

        assert not requirement.check(make_context())
        assert requirement.check(make_context(channel_id=1))

    def test_requires_an_id(self):
        with pytest.raises(ValueError):
            IdentityRequirement()


class TestTimeWindowRequirement:
    """Test message time restrictions."""

    def test_inside_window(self, make_context):
        requirement = TimeWindowRequirement(SENT_AT + timedelta(minutes=5), timedelta(minutes=10))

        assert requirement.check(make_context())

    def test_bounds_are_inclusive(self, make_context):
        requirement = TimeWindowRequirement(SENT_AT + timedelta(minutes=10), timedelta(minutes=10))

        assert requirement.check(make_context())

    def test_outside_window(self, make_context):
        requirement = TimeWindowRequirement(SENT_AT + timedelta(hours=1), timedelta(minutes=10))

        assert not requirement.check(make_context())

    def test_edited_timestamp(self, make_context):
        requirement = TimeWindowRequirement(SENT_AT, timedelta(minutes=1), stamp=TimestampField.EDITED)

        assert not requirement.check(make_context())
        assert requirement.check(make_context(edited_timestamp=SENT_AT + timedelta(seconds=30)))

    def test_naive_center_is_utc(self, make_context):
        requirement = TimeWindowRequirement(datetime(2024, 1, 1, 12, 30), timedelta(hours=1))

        assert requirement.center.tzinfo is timezone.utc
        assert requirement.check(make_context())
        assert not requirement.check(make_context(timestamp=SENT_AT - timedelta(hours=2)))
        assert requirement.check(make_context(timestamp=datetime(2024, 1, 1, 12, 0)))


class TestChannelNameRequirement:
    """Test channel name restrictions."""

    @pytest.mark.parametrize(
        "pattern,match,expected",
        [
            ("test-channel", NameMatch.FULL_NAME, True),
            ("test", NameMatch.FULL_NAME, False),
            ("test", NameMatch.CONTAINS, True),
            ("bots", NameMatch.CONTAINS, False),
            ("bots", NameMatch.NOT_CONTAINS, True),
            ("test", NameMatch.NOT_CONTAINS, False),
            (r"test-\w+", NameMatch.REGEX, True),
            (r"test", NameMatch.REGEX, False),
        ],
    )
    def test_matching(self, make_context, pattern, match, expected):
        assert ChannelNameRequirement(pattern, match).check(make_context()) is expected

    def test_unknown_channel_name(self, make_context):
        requirement = ChannelNameRequirement("general", NameMatch.NOT_CONTAINS)

        assert not requirement.check(make_context(channel_name=None))


class TestChannelTypeRequirement:
    """Test channel type restrictions."""

    def test_matching_type(self, make_context):
        requirement = ChannelTypeRequirement(hikari.ChannelType.GUILD_TEXT)

        assert requirement.check(make_context(channel_type=hikari.ChannelType.GUILD_TEXT))
        assert not requirement.check(make_context(channel_type=hikari.ChannelType.GUILD_NEWS))

    def test_unknown_channel_type(self, make_context):
        assert not ChannelTypeRequirement(hikari.ChannelType.GUILD_TEXT).check(make_context())

    def test_combines_with_channel_name(self, make_context):
        requirement = ChannelTypeRequirement(hikari.ChannelType.GUILD_TEXT) & ChannelNameRequirement("test-channel")

        assert requirement.check(make_context(channel_type=hikari.ChannelType.GUILD_TEXT))


class TestContextValueRequirement:
    """Test requirements over named context values."""

    def test_extra_value(self, make_context):
        requirement = ContextValueRequirement("premium", True)

        assert requirement.check(make_context(extras={"premium": True}))
        assert not requirement.check(make_context())

    def test_falls_back_to_context_fields(self, make_context):
        assert ContextValueRequirement("guild_id", 123456789).check(make_context())
