"""AI conversation orchestration on top of the OpenAI chat completions API.

Builds prompts from personality templates and a short history window, calls the
provider once and shapes the reply. Provider errors are logged and re-raised as
AiGenerationError; nothing is retried.
"""
import json
import logging
import re
from typing import Dict, Iterable, List, Optional

from openai import AsyncOpenAI
from pydantic import BaseModel, Field

from core.config import HISTORY_WINDOW, OPENAI_API_KEY, OPENAI_MODEL
from core.models import Message
from services.personalities import DEFAULT_PERSONALITY, get_personality

logger = logging.getLogger(__name__)

RESPONSE_GUIDANCE = (
    "\n\nIMPORTANT: Keep responses conversational and natural. If you notice grammar or vocabulary "
    "errors, provide gentle corrections. Be encouraging and help build confidence."
)

SCORE_RE = re.compile(r"\bscore\b[\s*:=-]*(?:is\s*)?(\d{1,3})", re.IGNORECASE)
BULLET_RE = re.compile(r"^(?:[-*•]|\d+[.)])\s+")

DEFAULT_IMPROVEMENTS = ["Practice more complex sentence structures", "Expand vocabulary"]
DEFAULT_STRENGTHS = ["Good basic grammar", "Clear communication"]
DEFAULT_RECOMMENDATIONS = {
    "daily_plan": [
        "Review 20 essential vocabulary words",
        "Practice one dialogue conversation",
        "Read one short passage",
    ],
    "review_items": ["Previous week vocabulary", "Grammar patterns"],
    "new_content": ["Business email templates", "Interview phrases"],
    "focus_areas": ["Pronunciation", "Grammar accuracy"],
}


class AiGenerationError(Exception):
    """The provider call failed"""


class ChatReply(BaseModel):
    message: str
    suggestions: List[str] = Field(default_factory=list)
    corrections: List[dict] = Field(default_factory=list)
    vocabulary: List[dict] = Field(default_factory=list)


class Assessment(BaseModel):
    score: Optional[int]
    feedback: str
    improvements: List[str]
    strengths: List[str]


class Recommendations(BaseModel):
    daily_plan: List[str]
    review_items: List[str]
    new_content: List[str]
    focus_areas: List[str]
    advice: str


def trim_history(messages: Iterable, limit: int = HISTORY_WINDOW) -> List[Dict[str, str]]:
    """Most recent `limit` messages as provider-ready {role, content} dicts"""
    items = list(messages)
    if limit <= 0:
        return []
    window = items[-limit:]
    return [
        {"role": m.role, "content": m.content} if isinstance(m, Message)
        else {"role": m["role"], "content": m["content"]}
        for m in window
    ]


def build_system_prompt(base_prompt: str, essential_category: Optional[str] = None,
                        target_vocabulary: Optional[List[str]] = None) -> str:
    prompt = base_prompt
    if essential_category:
        prompt += (
            f"\n\nCurrent learning focus: {essential_category} level English. "
            "Tailor your responses to this level."
        )
    if target_vocabulary:
        prompt += (
            f"\n\nTarget vocabulary to practice: {', '.join(target_vocabulary)}. "
            "Try to naturally incorporate these words when appropriate."
        )
    return prompt + RESPONSE_GUIDANCE


def parse_score(text: str) -> Optional[int]:
    match = SCORE_RE.search(text or "")
    if not match:
        return None
    return max(1, min(100, int(match.group(1))))


def parse_sections(text: str, headings: Dict[str, List[str]]) -> Dict[str, List[str]]:
    """Collect the bullet items listed under each heading.

    `headings` maps a section name to the titles that introduce it, e.g.
    {"strengths": ["strengths"]}. Sections absent from the text are absent from
    the result. A bulleted line only opens a section when nothing follows its
    colon, so "1. Review: verbs" stays an item. An unknown bare heading such as
    "Overall feedback:" closes the current section.
    """
    lookup = {title.lower(): section for section, titles in headings.items() for title in titles}
    sections: Dict[str, List[str]] = {}
    current = None
    for line in (text or "").splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        bullet = BULLET_RE.match(stripped)
        body = BULLET_RE.sub("", stripped).strip() if bullet else stripped
        title, colon, rest = body.partition(":")
        key = re.sub(r"^[#*\s]+|[*\s]+$", "", title).lower()
        rest = rest.strip(" *")
        if colon and not (bullet and rest):
            if key in lookup:
                current = lookup[key]
                sections.setdefault(current, [])
                if rest:
                    sections[current].append(rest)
                continue
            if not bullet and not rest:
                current = None
                continue
        if current and bullet:
            sections[current].append(body)
    return {name: items for name, items in sections.items() if items}


class AiService:
    def __init__(self, client=None, api_key: str = OPENAI_API_KEY, model: str = OPENAI_MODEL,
                 history_window: int = HISTORY_WINDOW):
        self.api_key = api_key
        self.model = model
        self.history_window = history_window
        if client is None and api_key:
            client = AsyncOpenAI(api_key=api_key)
        self.client = client

    def is_configured(self) -> bool:
        return bool(self.api_key) and self.client is not None

    async def validate_configuration(self) -> bool:
        """Check the provider accepts our key by listing models"""
        if not self.is_configured():
            return False
        try:
            await self.client.models.list()
            return True
        except Exception:
            logger.exception("OpenAI configuration validation failed")
            return False

    async def _complete(self, messages, failure: str, **params) -> str:
        if self.client is None:
            raise AiGenerationError(failure)
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                **params,
            )
        except Exception as e:
            logger.exception("OpenAI API error: %s", e)
            raise AiGenerationError(failure) from e

        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""

    # ----------------------------
    # CHAT
    # ----------------------------

    async def generate_chat_response(self, message: str, history=(), personality: str = DEFAULT_PERSONALITY,
                                     essential_category: Optional[str] = None,
                                     target_vocabulary: Optional[List[str]] = None) -> ChatReply:
        template = get_personality(personality)

        messages = [{
            "role": "system",
            "content": build_system_prompt(template.system_prompt, essential_category, target_vocabulary),
        }]
        messages += trim_history(history, self.history_window)
        messages.append({"role": "user", "content": message})

        logger.info("Chat completion: personality=%s history=%d", personality, len(messages) - 2)
        reply = await self._complete(
            messages,
            "Failed to generate AI response",
            max_tokens=500,
            temperature=0.7,
            presence_penalty=0.1,
            frequency_penalty=0.1,
        )
        # structured extras are not requested from the model yet
        return ChatReply(message=reply)

    # ----------------------------
    # ASSESSMENT
    # ----------------------------

    async def generate_assessment(self, user_text: str, target_content: Optional[str] = None,
                                  assessment_type: str = "overall") -> Assessment:
        system_prompt = (
            "You are an English language assessment AI. Analyze the following English text and provide:\n"
            "1. A score from 1-100 on its own line, formatted as 'Score: <number>'\n"
            f"2. Specific feedback on {assessment_type}\n"
            "3. A 'Strengths:' section listing strengths to acknowledge as bullet points\n"
            "4. An 'Improvements:' section listing areas for improvement as bullet points\n\n"
            "Be encouraging but constructive. Focus on helping the learner improve."
        )
        user_prompt = f'Please assess this English text: "{user_text}"'
        if target_content:
            user_prompt += f"\nThe learner was practicing: {target_content}"

        feedback = await self._complete(
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "Failed to generate assessment",
            max_tokens=300,
            temperature=0.3,
        )

        sections = parse_sections(feedback, {
            "strengths": ["strengths"],
            "improvements": ["improvements", "areas for improvement"],
        })
        return Assessment(
            score=parse_score(feedback),
            feedback=feedback,
            improvements=sections.get("improvements", list(DEFAULT_IMPROVEMENTS)),
            strengths=sections.get("strengths", list(DEFAULT_STRENGTHS)),
        )

    # ----------------------------
    # RECOMMENDATIONS
    # ----------------------------

    async def generate_recommendations(self, user_id: str, learning_history: List[dict],
                                       current_level: str) -> Recommendations:
        system_prompt = (
            "You are a personalized English learning advisor. Based on the user's learning history and "
            "current level, provide specific recommendations under these headings:\n"
            "Daily plan: (3-5 items)\n"
            "Review: content to review\n"
            "New content: new content to explore\n"
            "Focus areas: areas that need focus\n\n"
            "Use bullet points under each heading. Be specific and actionable."
        )
        recent = json.dumps(learning_history[-5:], default=str)

        logger.info("Generating recommendations for user %s at level %s", user_id, current_level)
        advice = await self._complete(
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": f"User level: {current_level}. Recent learning: {recent}"},
            ],
            "Failed to generate recommendations",
            max_tokens=400,
            temperature=0.5,
        )

        sections = parse_sections(advice, {
            "daily_plan": ["daily plan", "daily learning plan"],
            "review_items": ["review", "content to review", "review items"],
            "new_content": ["new content", "new content to explore"],
            "focus_areas": ["focus areas", "areas that need focus"],
        })
        return Recommendations(
            **{name: sections.get(name, list(default)) for name, default in DEFAULT_RECOMMENDATIONS.items()},
            advice=advice,
        )
