"""XMTP MLS topic names."""

WELCOME_PREFIX = "/xmtp/mls/1/w-"
CONVERSATION_PREFIX = "/xmtp/mls/1/g-"
TOPIC_SUFFIX = "/proto"


def build_welcome_topic(installation_id: str) -> str:
    return f"{WELCOME_PREFIX}{installation_id}{TOPIC_SUFFIX}"


def build_conversation_topic(group_id: str) -> str:
    return f"{CONVERSATION_PREFIX}{group_id}{TOPIC_SUFFIX}"


def is_welcome_topic(topic: str) -> bool:
    return topic.startswith(WELCOME_PREFIX) and topic.endswith(TOPIC_SUFFIX)


def is_conversation_topic(topic: str) -> bool:
    return topic.startswith(CONVERSATION_PREFIX) and topic.endswith(TOPIC_SUFFIX)
