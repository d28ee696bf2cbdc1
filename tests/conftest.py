"""Pytest configuration and shared fixtures."""

import logging
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import hikari
import pytest
import pytest_asyncio

from bruhbot.database import DatabaseManager, DocumentStore
from bruhbot.permissions import InvocationContext

# Disable logging during tests
logging.disable(logging.CRITICAL)

SENT_AT = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_user():
    """Mock Discord user."""
    user = MagicMock(spec=hikari.User)
    user.id = 111111111
    user.username = "testuser"
    user.display_name = "Test User"
    user.is_bot = False
    user.mention = "<@111111111>"
    return user


@pytest.fixture
def mock_role():
    """Mock guild role without special permissions."""
    role = MagicMock(spec=hikari.Role)
    role.id = 222222222
    role.name = "Member"
    role.permissions = hikari.Permissions.SEND_MESSAGES | hikari.Permissions.READ_MESSAGE_HISTORY
    return role


@pytest.fixture
def mock_admin_role():
    """Mock guild role with administrator permissions."""
    role = MagicMock(spec=hikari.Role)
    role.id = 333333333
    role.name = "Admin"
    role.permissions = hikari.Permissions.ADMINISTRATOR
    return role


@pytest.fixture
def mock_member(mock_user, mock_role):
    """Mock Discord member holding a plain role."""
    member = MagicMock(spec=hikari.Member)
    member.id = mock_user.id
    member.username = mock_user.username
    member.display_name = mock_user.display_name
    member.is_bot = mock_user.is_bot
    member.user = mock_user
    member.role_ids = [mock_role.id]
    member.get_roles = MagicMock(return_value=[mock_role])
    return member


@pytest.fixture
def mock_channel():
    """Mock Discord channel."""
    channel = MagicMock(spec=hikari.GuildTextChannel)
    channel.id = 444444444
    channel.name = "test-channel"
    channel.type = hikari.ChannelType.GUILD_TEXT
    channel.mention = "<#444444444>"
    return channel


@pytest.fixture
def mock_message_event(mock_user, mock_channel, mock_member):
    """Mock guild message create event."""
    event = MagicMock(spec=hikari.GuildMessageCreateEvent)
    event.author = mock_user
    event.author_id = mock_user.id
    event.member = mock_member
    event.guild_id = 123456789
    event.channel_id = mock_channel.id
    event.content = '!echo "hello there"'
    event.message = MagicMock()
    event.message.timestamp = SENT_AT
    event.message.edited_timestamp = None
    event.message.respond = AsyncMock()
    event.get_channel = MagicMock(return_value=mock_channel)
    return event


@pytest.fixture
def make_context():
    """Factory for invocation contexts with a mocked responder."""

    def factory(content="", **overrides):
        values = {
            "actor_id": 111111111,
            "guild_id": 123456789,
            "channel_id": 444444444,
            "content": content,
            "timestamp": SENT_AT,
            "channel_name": "test-channel",
            "respond": AsyncMock(),
        }
        values.update(overrides)
        return InvocationContext(**values)

    return factory


@pytest.fixture
def mock_store():
    """Mock document store."""
    store = AsyncMock(spec=DocumentStore)
    store.store_document = AsyncMock(return_value=1)
    store.find_document = AsyncMock(return_value=None)
    store.record_usage = AsyncMock()
    return store


@pytest.fixture
def mock_bot(mock_store):
    """Mock bot exposing the attributes modules reach for."""
    bot = MagicMock()
    bot.prefix = "!"
    bot.store = mock_store
    bot.module_loader = MagicMock()
    bot.module_loader.get_loaded_modules = MagicMock(return_value=["basic"])
    return bot


@pytest_asyncio.fixture
async def db_manager(tmp_path):
    """Database manager backed by a throwaway sqlite file."""
    db = DatabaseManager(f"sqlite:///{tmp_path}/test.db", echo=False)
    await db.create_tables()
    yield db
    await db.close()


@pytest.fixture
def document_store(db_manager):
    return DocumentStore(db_manager)
