"""Tests for the conversation store."""
import uuid
from datetime import datetime, timezone

import pytest

from api.features.chat.entities.message import Message, Sender
from api.features.chat.exceptions import ForeignKeyViolation
from api.features.chat.repository import ConversationRepository


async def test_create_conversation_returns_existing_id(db_session):
    repo = ConversationRepository(db_session)

    conversation_id = await repo.create_conversation()

    assert uuid.UUID(conversation_id)
    assert await repo.conversation_exists(conversation_id) is True


async def test_create_conversation_ids_are_unique(db_session):
    repo = ConversationRepository(db_session)

    first = await repo.create_conversation()
    second = await repo.create_conversation()

    assert first != second


async def test_unknown_and_malformed_ids_do_not_exist(db_session):
    repo = ConversationRepository(db_session)

    assert await repo.conversation_exists(str(uuid.uuid4())) is False
    assert await repo.conversation_exists("not-a-uuid") is False
    assert await repo.conversation_exists("") is False


async def test_append_to_missing_conversation_violates_foreign_key(db_session):
    repo = ConversationRepository(db_session)

    with pytest.raises(ForeignKeyViolation):
        await repo.append_message(
            conversation_id=str(uuid.uuid4()), sender=Sender.USER, content="hi"
        )
    with pytest.raises(ForeignKeyViolation):
        await repo.append_message(
            conversation_id="not-a-uuid", sender=Sender.USER, content="hi"
        )


async def test_session_usable_after_foreign_key_violation(db_session):
    repo = ConversationRepository(db_session)
    with pytest.raises(ForeignKeyViolation):
        await repo.append_message(
            conversation_id=str(uuid.uuid4()), sender=Sender.USER, content="hi"
        )

    conversation_id = await repo.create_conversation()
    await repo.append_message(
        conversation_id=conversation_id, sender=Sender.USER, content="hi"
    )

    assert len(await repo.list_messages(conversation_id)) == 1


async def test_unknown_sender_rejected(db_session):
    repo = ConversationRepository(db_session)
    conversation_id = await repo.create_conversation()

    with pytest.raises(ValueError):
        await repo.append_message(
            conversation_id=conversation_id, sender="system", content="hi"
        )


async def test_list_messages_in_insertion_order(db_session):
    repo = ConversationRepository(db_session)
    conversation_id = await repo.create_conversation()
    other_id = await repo.create_conversation()

    for i in range(3):
        await repo.append_message(
            conversation_id=conversation_id, sender=Sender.USER, content=f"q{i}"
        )
        await repo.append_message(
            conversation_id=conversation_id, sender=Sender.ASSISTANT, content=f"a{i}"
        )
    await repo.append_message(
        conversation_id=other_id, sender=Sender.USER, content="elsewhere"
    )

    messages = await repo.list_messages(conversation_id)

    assert [m.content for m in messages] == ["q0", "a0", "q1", "a1", "q2", "a2"]
    assert [m.sender for m in messages] == ["user", "ai"] * 3
    assert all(m.conversation_id == conversation_id for m in messages)
    timestamps = [m.created_at for m in messages]
    assert timestamps == sorted(timestamps)


async def test_list_messages_of_empty_conversation(db_session):
    repo = ConversationRepository(db_session)
    conversation_id = await repo.create_conversation()

    assert await repo.list_messages(conversation_id) == []


async def test_sender_reads_back_as_plain_string(db_session):
    repo = ConversationRepository(db_session)
    conversation_id = await repo.create_conversation()
    await repo.append_message(
        conversation_id=conversation_id, sender=Sender.ASSISTANT, content="hi"
    )
    db_session.expire_all()

    (message,) = await repo.list_messages(conversation_id)

    assert type(message.sender) is str
    assert message.sender == "ai"
    assert Sender(message.sender) is Sender.ASSISTANT


async def test_equal_timestamps_keep_insertion_order(db_session):
    repo = ConversationRepository(db_session)
    conversation_id = await repo.create_conversation()
    same_instant = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
    for content in ["first", "second", "third"]:
        db_session.add(
            Message(
                conversation_id=conversation_id,
                sender=Sender.USER.value,
                content=content,
                created_at=same_instant,
            )
        )
        await db_session.commit()

    messages = await repo.list_messages(conversation_id)

    assert [m.content for m in messages] == ["first", "second", "third"]
    assert len({m.created_at for m in messages}) == 1
