"""
Notification text for the race.

Deterministic templates are the source of truth. When ghost mode is on and an
LLM is configured, the body is rewritten in the shadow's voice; any failure,
timeout or empty reply falls back to the template.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from shadow_race.config import get_settings
from shadow_race.schemas import ShadowConfigSchema
from shadow_race.services.alignment import lead_tone, SHADOW_AHEAD, USER_AHEAD
from shadow_race.services.llm_service import LLMService

logger = logging.getLogger(__name__)


@dataclass
class MessageContext:
    """A templated draft plus the numbers it was built from."""
    kind: str
    title: str
    body: str
    facts: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ComposedMessage:
    title: str
    body: str
    source: str


def format_number(value: float) -> str:
    """3.0 -> "3", 3.5 -> "3.5", 3.46 -> "3.46"."""
    return f"{float(value):g}"


def pace_taunt_context(lead: float, target: float) -> MessageContext:
    """Nightly taunt draft, chosen by the lead band."""
    tone = lead_tone(lead)
    pace = format_number(target)
    if tone == SHADOW_AHEAD:
        title = "Shadow Taunt: Catch me if you can"
        body = f"Your shadow is ahead by {lead:.1f}. New target set to {pace}. Tomorrow is your move."
    elif tone == USER_AHEAD:
        title = "Shadow Taunt: Feeling the heat?"
        body = f"You are ahead by {abs(lead):.1f}. Shadow bumps pace to {pace}. Keep the lead."
    else:
        title = "Shadow Taunt: Neck and neck"
        body = f"It's close. Shadow sets pace {pace}. One push tilts the race."
    return MessageContext(
        kind=tone,
        title=title,
        body=body,
        facts={"lead": f"{abs(lead):.1f}", "leader": tone, "shadow_pace": pace},
    )


def nudge_context(decision_kind: str, delta: int, target_today: int, completed_today: int) -> MessageContext:
    """Intraday nudge draft for a progress decision."""
    direction = "behind" if delta < 0 else "ahead"
    gap = abs(int(delta or 0))
    title = "Keep pace today"
    body = f"Target {target_today}, done {completed_today}. You are {direction} by {gap}."
    if decision_kind == "boost":
        title = "On a roll!"
        body = f"You are ahead by {gap}. Consider tackling a stretch task."
    elif decision_kind == "slowdown":
        title = "It's okay to slow down"
        body = f"You are behind by {gap}. Try a small win to recover momentum."
    elif decision_kind == "nudge":
        title = "One more to go" if delta < 0 else "Nice pace"
        body = "Finish one quick task to hit your target." if delta < 0 else "Optional extra if you feel good."
    return MessageContext(
        kind=decision_kind,
        title=title,
        body=body,
        facts={"target": target_today, "done": completed_today, "gap": gap, "direction": direction},
    )


class MessageComposer:
    """Turns a MessageContext into final text, or None to defer."""
    
    name = "base"
    
    async def compose(self, context: MessageContext) -> Optional[ComposedMessage]:
        raise NotImplementedError


class TemplateComposer(MessageComposer):
    name = "template"
    
    async def compose(self, context: MessageContext) -> Optional[ComposedMessage]:
        return ComposedMessage(title=context.title, body=context.body, source=self.name)


class GeminiComposer(MessageComposer):
    name = "ai"
    
    def __init__(self, llm_service: LLMService, timeout_seconds: Optional[float] = None):
        self.llm_service = llm_service
        self.timeout_seconds = timeout_seconds or get_settings().ai_timeout_seconds
    
    async def compose(self, context: MessageContext) -> Optional[ComposedMessage]:
        text = await asyncio.wait_for(
            self.llm_service.rewrite_notification(context.body, context.facts),
            timeout=self.timeout_seconds,
        )
        if not text:
            return None
        return ComposedMessage(title=context.title, body=text[:500], source=self.name)


class FallbackComposer(MessageComposer):
    """First composer that succeeds wins. The template composer is always last."""
    
    name = "fallback"
    
    def __init__(self, composers: List[MessageComposer]):
        self.composers = [c for c in composers if not isinstance(c, TemplateComposer)]
        self.composers.append(TemplateComposer())
    
    async def compose(self, context: MessageContext) -> ComposedMessage:
        for composer in self.composers:
            try:
                result = await composer.compose(context)
            except Exception as e:
                logger.warning("Composer %s failed, falling back: %r", composer.name, e)
                continue
            if result is not None:
                return result
        # Unreachable while TemplateComposer is last
        return ComposedMessage(title=context.title, body=context.body, source="template")


def build_composer(config: ShadowConfigSchema, llm_service: Optional[LLMService] = None) -> FallbackComposer:
    """Composer chain for a user: AI first when ghost mode is on and an LLM is available."""
    composers: List[MessageComposer] = []
    if config.ghost_mode_ai:
        llm_service = llm_service or LLMService()
        if llm_service.available:
            composers.append(GeminiComposer(llm_service))
    return FallbackComposer(composers)
