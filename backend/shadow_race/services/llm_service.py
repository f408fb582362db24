import logging
from typing import Dict, Any, Optional

from google import genai
from google.genai import types

from shadow_race.config import get_settings

logger = logging.getLogger(__name__)


class GeminiProvider:
    """Gemini provider using the google-genai SDK."""
    
    def __init__(self, api_key: Optional[str] = None, model_id: Optional[str] = None):
        settings = get_settings()
        self.api_key = api_key or settings.gemini_api_key
        self.model_id = model_id or settings.gemini_model
        self.client = genai.Client(api_key=self.api_key)
        self.prompts = self._load_prompts()
    
    def _load_prompts(self) -> Dict[str, str]:
        """Load prompts from the prompt registry."""
        return {
            "ghost_system": (
                "You are the Shadow, a playful rival racing the user through their daily habits. "
                "You are competitive but never mean. Never mention that you are an AI."
            ),
            "ghost_rewrite": """Rewrite this race notification in the Shadow's voice.

## Facts (keep every number exactly as written)
{facts}

## Draft
{body}

## Rules
- One or two short sentences, at most 160 characters.
- Plain text, no emojis, no quotes, no hashtags.
- Reply with the rewritten text only.
""",
        }
    
    def load_prompt(self, prompt_name: str) -> str:
        return self.prompts.get(prompt_name, "")

    async def complete(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: float = 0.9,
        max_tokens: int = 200,
    ) -> Dict[str, Any]:
        """Generate a completion. Errors propagate to the caller."""
        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=temperature,
            max_output_tokens=max_tokens,
        )
        
        contents = [types.Content(role="user", parts=[types.Part.from_text(text=prompt)])]
        
        response = await self.client.aio.models.generate_content(
            model=self.model_id,
            contents=contents,
            config=config,
        )
        
        text_parts = []
        if response.candidates:
            cand = response.candidates[0]
            if cand.content and cand.content.parts:
                for part in cand.content.parts:
                    if part.text:
                        text_parts.append(part.text)
        
        return {"text": "".join(text_parts)}


class LLMService:
    """Optional AI text generation. Unavailable when no API key is configured."""
    
    def __init__(self, provider: Optional[GeminiProvider] = None):
        if provider is None and get_settings().gemini_api_key:
            provider = GeminiProvider()
        self.provider = provider
    
    @property
    def available(self) -> bool:
        return self.provider is not None
    
    async def rewrite_notification(self, body: str, facts: Dict[str, Any]) -> str:
        """Rewrite a notification body in the shadow's voice."""
        if not self.provider:
            raise RuntimeError("LLM provider not configured")
        
        facts_text = "\n".join(f"- {k}: {v}" for k, v in facts.items())
        prompt = self.provider.load_prompt("ghost_rewrite").format(facts=facts_text, body=body)
        result = await self.provider.complete(
            prompt,
            system_instruction=self.provider.load_prompt("ghost_system"),
        )
        return (result.get("text") or "").strip()
