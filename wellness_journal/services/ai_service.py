#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Wellness Journal - Assistant Service
Supportive chat replies from the OpenAI API with a fixed fallback
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from openai import AsyncOpenAI

from wellness_journal.config import JournalSettings, get_settings
from wellness_journal.core.models import JournalError

logger = logging.getLogger(__name__)

FALLBACK_RESPONSE = (
    "I'm here to listen and support you. "
    "Can you tell me more about what's on your mind?"
)

SYSTEM_PROMPT = (
    "You are a supportive mental wellness assistant for youth. "
    "Respond with empathy, warmth, and encouragement. "
    "Keep responses conversational, supportive, and under 100 words."
)

# ===== EXCEPTIONS =====

class AssistantError(JournalError):
    """Assistant request failed"""
    pass

# ===== DATA CLASSES =====

class AIProvider(Enum):
    OPENAI = "openai"
    FALLBACK = "fallback"

@dataclass
class AssistantReply:
    content: str
    provider: AIProvider
    response_time_ms: int = 0
    error: Optional[str] = None
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def is_fallback(self) -> bool:
        return self.provider == AIProvider.FALLBACK

# ===== SERVICE =====

class AssistantService:
    """One message in, one reply out; any failure yields FALLBACK_RESPONSE"""

    def __init__(self, settings: Optional[JournalSettings] = None, client: Optional[AsyncOpenAI] = None):
        self.settings = settings or get_settings()
        self.client = client

        if self.client is None and self.settings.ai_enabled:
            self.client = AsyncOpenAI(api_key=self.settings.OPENAI_API_KEY, timeout=self.settings.AI_TIMEOUT)
            logger.info("🤖 Assistant service initialized")
        elif self.client is None:
            logger.warning("⚠️ Assistant disabled (no OPENAI_API_KEY), using fallback replies")

        self.stats: Dict[str, int] = {
            "total_requests": 0,
            "successful_requests": 0,
            "fallback_responses": 0,
        }

    @property
    def enabled(self) -> bool:
        return self.client is not None

    async def reply(self, message: str) -> AssistantReply:
        self.stats["total_requests"] += 1
        started = time.monotonic()

        try:
            if not isinstance(message, str) or not message.strip():
                raise AssistantError("Message is required")
            if not self.enabled:
                raise AssistantError("OPENAI_API_KEY is not configured")

            content = await self._request_completion(message.strip())
            self.stats["successful_requests"] += 1
            return AssistantReply(
                content=content,
                provider=AIProvider.OPENAI,
                response_time_ms=int((time.monotonic() - started) * 1000),
            )

        except Exception as e:
            logger.error(f"❌ Assistant request failed: {e}")
            self.stats["fallback_responses"] += 1
            return AssistantReply(
                content=FALLBACK_RESPONSE,
                provider=AIProvider.FALLBACK,
                response_time_ms=int((time.monotonic() - started) * 1000),
                error=str(e),
            )

    async def chat(self, message: str) -> str:
        return (await self.reply(message)).content

    async def _request_completion(self, message: str) -> str:
        response = await self.client.chat.completions.create(
            model=self.settings.OPENAI_MODEL,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": message},
            ],
            max_tokens=self.settings.OPENAI_MAX_TOKENS,
            temperature=0.7,
            top_p=0.95,
            timeout=self.settings.AI_TIMEOUT,
        )

        if not response.choices:
            raise AssistantError("Empty completion payload")
        content = response.choices[0].message.content
        if not content or not content.strip():
            raise AssistantError("Empty completion text")
        return content.strip()

    def get_stats(self) -> Dict[str, Any]:
        total = self.stats["total_requests"]
        return {
            **self.stats,
            "enabled": self.enabled,
            "model": self.settings.OPENAI_MODEL,
            "success_rate": (self.stats["successful_requests"] / total * 100) if total else 0.0,
        }
