"""AI conversation, assessment and recommendation routes"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from api.auth.dependencies import get_current_user
from core.models import AssessmentIn, ConversationCreate, Message, MessageIn, utcnow
from core.response import send_success
from services.ai_service import AiGenerationError
from services.personalities import PERSONALITIES, list_personalities, welcome_message

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai")

# Mock learning history until progress tracking is persisted
MOCK_LEARNING_HISTORY = [
    {"content": "CET-4 vocabulary", "score": 85},
    {"content": "Business dialogue", "score": 78},
]


def require_configured(request: Request):
    """Reject AI work with 503 while no provider key is set"""
    if not request.app.state.ai.is_configured():
        raise HTTPException(status_code=503, detail="AI service is not properly configured")


async def get_owned_conversation(conversation_id: str, request: Request, user: dict):
    conversation = await request.app.state.conversations.get(conversation_id)
    if conversation is None:
        raise HTTPException(status_code=404, detail="Conversation not found")
    if conversation.user_id != user["id"]:
        raise HTTPException(status_code=403, detail="Access denied")
    return conversation


@router.get("/status")
async def service_status(request: Request):
    """Provider configuration and connectivity"""
    ai = request.app.state.ai
    configured = ai.is_configured()
    connected = await ai.validate_configuration() if configured else False
    return send_success(
        {
            "configured": configured,
            "connected": connected,
            "model": ai.model,
            "personalities": list(PERSONALITIES),
        },
        "AI service status checked",
    )


@router.get("/personalities")
async def personalities():
    return send_success(list_personalities(), "AI personalities retrieved successfully")


@router.post("/conversations")
async def start_conversation(payload: ConversationCreate, request: Request, user=Depends(get_current_user)):
    """Start a conversation with one of the AI personalities"""
    require_configured(request)
    conversation = await request.app.state.conversations.create(
        user["id"],
        payload.ai_personality,
        conversation_type=payload.conversation_type,
        essential_category=payload.essential_category,
    )
    logger.info("User %s started conversation %s (%s)", user["id"], conversation.id, conversation.personality)

    return send_success(
        {
            "conversationId": conversation.id,
            "aiPersonality": conversation.personality,
            "welcomeMessage": welcome_message(conversation.personality, payload.essential_category),
            "availablePersonalities": list(PERSONALITIES),
        },
        "AI conversation started successfully",
        201,
    )


@router.get("/conversations")
async def list_conversations(request: Request, user=Depends(get_current_user)):
    """List the caller's conversations, most recently active first"""
    conversations = await request.app.state.conversations.list_for_user(user["id"])
    return send_success(
        [
            {
                "id": c.id,
                "personality": c.personality,
                "startedAt": c.started_at,
                "lastActiveAt": c.last_active_at,
                "messageCount": len(c.messages),
                "lastMessage": c.messages[-1].content if c.messages else "",
            }
            for c in conversations
        ],
        "User conversations retrieved successfully",
    )


@router.get("/conversations/{conversation_id}")
async def get_conversation(conversation_id: str, request: Request, user=Depends(get_current_user)):
    conversation = await get_owned_conversation(conversation_id, request, user)
    return send_success(
        {
            "conversationId": conversation.id,
            "personality": conversation.personality,
            "messages": [m.public() for m in conversation.messages],
            "startedAt": conversation.started_at,
            "lastActiveAt": conversation.last_active_at,
            "messageCount": len(conversation.messages),
        },
        "Conversation history retrieved successfully",
    )


@router.post("/conversations/{conversation_id}/messages")
async def send_message(conversation_id: str, payload: MessageIn, request: Request, user=Depends(get_current_user)):
    """Send a learner message and append the AI reply"""
    conversation = await get_owned_conversation(conversation_id, request, user)
    require_configured(request)

    ai = request.app.state.ai
    store = request.app.state.conversations
    user_message = Message(role="user", content=payload.message_text, timestamp=utcnow())

    try:
        reply = await ai.generate_chat_response(
            payload.message_text,
            history=conversation.messages,
            personality=conversation.personality,
            essential_category=conversation.essential_category,
            target_vocabulary=payload.target_vocabulary,
        )
    except AiGenerationError:
        raise HTTPException(status_code=500, detail="Failed to send message")

    await store.append(conversation_id, user_message)
    conversation = await store.append(conversation_id, Message(role="assistant", content=reply.message))

    return send_success(
        {
            "conversationId": conversation_id,
            "userMessage": payload.message_text,
            "aiResponse": reply.message,
            "suggestions": reply.suggestions,
            "corrections": reply.corrections,
            "vocabulary": reply.vocabulary,
            "messageCount": len(conversation.messages),
        },
        "Message sent successfully",
    )


@router.post("/assess")
async def assess(payload: AssessmentIn, request: Request, user=Depends(get_current_user)):
    """Assess a piece of learner English"""
    require_configured(request)
    try:
        assessment = await request.app.state.ai.generate_assessment(
            payload.text, payload.target_content, payload.assessment_type
        )
    except AiGenerationError:
        raise HTTPException(status_code=500, detail="Failed to complete assessment")

    return send_success(
        {
            "assessmentType": payload.assessment_type,
            "score": assessment.score,
            "feedback": assessment.feedback,
            "improvements": assessment.improvements,
            "strengths": assessment.strengths,
            "timestamp": utcnow(),
        },
        "Assessment completed successfully",
    )


@router.get("/recommendations")
async def recommendations(request: Request, user=Depends(get_current_user)):
    require_configured(request)
    try:
        result = await request.app.state.ai.generate_recommendations(
            user["id"], MOCK_LEARNING_HISTORY, "intermediate"
        )
    except AiGenerationError:
        raise HTTPException(status_code=500, detail="Failed to generate recommendations")

    return send_success(
        {
            "userId": user["id"],
            "recommendations": {
                "dailyPlan": result.daily_plan,
                "reviewItems": result.review_items,
                "newContent": result.new_content,
                "focusAreas": result.focus_areas,
                "advice": result.advice,
            },
            "generatedAt": utcnow(),
        },
        "Personalized recommendations generated successfully",
    )
