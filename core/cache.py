import json
from typing import List, Optional

from redis.asyncio import Redis

from core.models import Conversation, Message, utcnow
from core.store import ConversationStore, new_conversation_id


class RedisConversationStore(ConversationStore):
    def __init__(self, redis_client: Redis, ttl: int = 0):
        self.redis = redis_client
        self.ttl = ttl

    # ----------------------------
    # KEYS
    # ----------------------------

    @staticmethod
    def meta_key(conversation_id):
        return f"conversation:{conversation_id}"

    @staticmethod
    def history_key(conversation_id):
        return f"conversation:{conversation_id}:messages"

    @staticmethod
    def user_key(user_id):
        return f"user:{user_id}:conversations"

    async def _touch(self, conversation_id):
        # sliding TTL, 0 keeps keys forever
        if self.ttl > 0:
            await self.redis.expire(self.meta_key(conversation_id), self.ttl)
            await self.redis.expire(self.history_key(conversation_id), self.ttl)

    async def _save_meta(self, conversation: Conversation):
        meta = conversation.model_dump(mode="json", exclude={"messages"})
        await self.redis.set(self.meta_key(conversation.id), json.dumps(meta))

    # ----------------------------
    # CONVERSATIONS
    # ----------------------------

    async def create(self, user_id, personality, conversation_type=None, essential_category=None):
        conversation = Conversation(
            id=new_conversation_id(),
            user_id=user_id,
            personality=personality,
            conversation_type=conversation_type,
            essential_category=essential_category,
        )
        await self._save_meta(conversation)
        await self.redis.sadd(self.user_key(user_id), conversation.id)
        await self._touch(conversation.id)
        return conversation

    async def get(self, conversation_id) -> Optional[Conversation]:
        raw = await self.redis.get(self.meta_key(conversation_id))
        if raw is None:
            return None
        meta = json.loads(raw)
        history = await self.redis.lrange(self.history_key(conversation_id), 0, -1)
        meta["messages"] = [json.loads(entry) for entry in history]
        return Conversation.model_validate(meta)

    async def append(self, conversation_id, message: Message):
        conversation = await self.get(conversation_id)
        if conversation is None:
            raise KeyError(conversation_id)

        await self.redis.rpush(self.history_key(conversation_id), message.model_dump_json())
        conversation.messages.append(message)
        conversation.last_active_at = utcnow()
        await self._save_meta(conversation)
        await self._touch(conversation_id)
        return conversation

    async def list_for_user(self, user_id) -> List[Conversation]:
        ids = await self.redis.smembers(self.user_key(user_id))
        conversations = []
        for conversation_id in ids:
            conversation = await self.get(conversation_id)
            # expired conversations leave stale ids behind
            if conversation is None:
                await self.redis.srem(self.user_key(user_id), conversation_id)
                continue
            conversations.append(conversation)
        return sorted(conversations, key=lambda c: c.last_active_at, reverse=True)

    async def close(self):
        await self.redis.aclose()
