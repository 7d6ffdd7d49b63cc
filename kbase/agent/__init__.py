"""AI assistant and service configuration.

Responsibilities:
    - Settings loaded from the environment
    - Demo and agno-backed live answers
    - Citation generation over context documents
    - Chat history, summaries and tag suggestions
"""

from kbase.agent.chat_agent import AIService, AIServiceDisabledError, get_ai_service
from kbase.agent.config import Settings, get_settings

__all__ = ["AIService", "AIServiceDisabledError", "Settings", "get_ai_service", "get_settings"]
