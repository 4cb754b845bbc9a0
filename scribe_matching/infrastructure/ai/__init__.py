# Scoring oracle clients
from scribe_matching.infrastructure.ai.chat_completions_oracle import ChatCompletionsOracle
from scribe_matching.infrastructure.ai.ollama_oracle import OllamaOracle
from scribe_matching.infrastructure.ai.factory import build_score_oracle

__all__ = [
    "ChatCompletionsOracle",
    "OllamaOracle",
    "build_score_oracle",
]
