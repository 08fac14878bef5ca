import re

from delivery_sim.app.protocols import ReplyPolicy
from delivery_sim.domain.scheduling.pools import AUTO_REPLIES

AUTO_REPLY_RULES: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(pattern, re.IGNORECASE), reply) for pattern, reply in AUTO_REPLIES
)


class RuleBasedReplies(ReplyPolicy):
    """First rule whose pattern is found in the message decides the reply."""

    def __init__(self, rules: tuple[tuple[re.Pattern[str], str], ...] = AUTO_REPLY_RULES):
        if not rules:
            raise ValueError("at least one reply rule is required")
        self.rules = rules

    def reply(self, text: str) -> str:
        for pattern, answer in self.rules:
            if pattern.search(text):
                return answer
        # only reachable with custom rules lacking a catch-all
        return self.rules[-1][1]


_default = RuleBasedReplies()


def auto_reply(text: str) -> str:
    return _default.reply(text)
