"""Constants for the explanation prompt and reply handling."""

from __future__ import annotations

SYSTEM_PROMPT: str = "You are a helpful web3 security assistant. Always respond with valid JSON."

PROMPT_ROLE_LINE: str = "You are a Web3 security analyst reviewing smart contract risks."
PROMPT_INSTRUCTIONS: tuple[str, ...] = (
    "Explain each finding in plain language for a non-technical reader.",
    "You may comment on whether the score looks reasonable, but do not change it.",
    'Respond with a JSON object with the keys "verdict", "summary" and "recommendations" '
    '(a list of strings). An optional "score" key may restate the score.',
)
EMPTY_GROUP_MARKER: str = "- none"

CHAT_COMPLETIONS_PATH: str = "/chat/completions"
MAX_COMPLETION_TOKENS: int = 600
