import asyncio

import pytest

from core.cache import RedisConversationStore
from core.models import Message
from core.store import InMemoryConversationStore, UserStore


class FakeRedis:
    """The handful of redis.asyncio commands the conversation store uses"""

    def __init__(self):
        self.values = {}
        self.lists = {}
        self.sets = {}
        self.expiries = {}
        self.closed = False

    async def set(self, key, value):
        self.values[key] = value

    async def get(self, key):
        return self.values.get(key)

    async def rpush(self, key, value):
        self.lists.setdefault(key, []).append(value)

    async def lrange(self, key, start, end):
        items = self.lists.get(key, [])
        return items[start:] if end == -1 else items[start:end + 1]

    async def sadd(self, key, member):
        self.sets.setdefault(key, set()).add(member)

    async def srem(self, key, member):
        self.sets.get(key, set()).discard(member)

    async def smembers(self, key):
        return set(self.sets.get(key, set()))

    async def expire(self, key, ttl):
        self.expiries[key] = ttl

    async def aclose(self):
        self.closed = True


@pytest.fixture(params=["memory", "redis"])
def store(request):
    if request.param == "memory":
        return InMemoryConversationStore()
    return RedisConversationStore(FakeRedis())


def run(coro):
    return asyncio.run(coro)


def test_create_and_read(store):
    conversation = run(store.create("1", "casual_friend", conversation_type="free_talk", essential_category="CET-4"))

    loaded = run(store.get(conversation.id))
    assert loaded.user_id == "1"
    assert loaded.personality == "casual_friend"
    assert loaded.essential_category == "CET-4"
    assert loaded.messages == []
    assert run(store.get("conv_missing")) is None


def test_append_keeps_order_and_bumps_activity(store):
    conversation = run(store.create("1", "friendly_teacher"))
    before = conversation.last_active_at

    run(store.append(conversation.id, Message(role="user", content="one")))
    updated = run(store.append(conversation.id, Message(role="assistant", content="two")))

    assert [m.content for m in updated.messages] == ["one", "two"]
    assert [m.content for m in run(store.get(conversation.id)).messages] == ["one", "two"]
    assert updated.last_active_at >= before


def test_append_to_unknown_conversation(store):
    with pytest.raises(KeyError):
        run(store.append("conv_missing", Message(role="user", content="hi")))


def test_list_for_user_filters_by_owner(store):
    mine = run(store.create("1", "friendly_teacher"))
    run(store.create("2", "friendly_teacher"))
    newer = run(store.create("1", "business_partner"))
    run(store.append(mine.id, Message(role="user", content="bump")))

    listed = run(store.list_for_user("1"))
    assert [c.id for c in listed] == [mine.id, newer.id]
    assert run(store.list_for_user("3")) == []


def test_conversation_ids_are_unique():
    store = InMemoryConversationStore()
    ids = {run(store.create("1", "friendly_teacher")).id for _ in range(50)}
    assert len(ids) == 50


def test_redis_layout_and_ttl():
    redis = FakeRedis()
    store = RedisConversationStore(redis, ttl=600)
    conversation = run(store.create("7", "friendly_teacher"))
    run(store.append(conversation.id, Message(role="user", content="hi")))

    assert f"conversation:{conversation.id}" in redis.values
    assert len(redis.lists[f"conversation:{conversation.id}:messages"]) == 1
    assert redis.sets["user:7:conversations"] == {conversation.id}
    assert redis.expiries[f"conversation:{conversation.id}:messages"] == 600

    run(store.close())
    assert redis.closed


def test_redis_drops_expired_ids_from_user_index():
    redis = FakeRedis()
    store = RedisConversationStore(redis)
    conversation = run(store.create("7", "friendly_teacher"))
    del redis.values[f"conversation:{conversation.id}"]

    assert run(store.list_for_user("7")) == []
    assert redis.sets["user:7:conversations"] == set()
    assert redis.expiries == {}


def test_user_store_seed_and_lookup():
    users = UserStore()
    demo = users.get_by_email("demo@chatlingo.com")
    assert demo.id == "1" and demo.is_verified
    assert users.find_by_email_or_username("nobody@example.com", "demo_user") is demo

    added = users.add("new@example.com", "newbie", "hash")
    assert added.id == "2"
    assert users.get_by_id("2") is added
    assert users.get_by_email("missing@example.com") is None
