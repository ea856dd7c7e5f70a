"""Chatbot JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pydantic import ValidationError

from reflectai.core.auth.csrf import csrf_protected
from reflectai.core.utils.validation import validation_failed
from reflectai.domains.chat.schemas.chat_schemas import ChatReply, ChatRequest, UsageResponse
from reflectai.domains.chat.services import chatbot_service, usage_service

chat_api_bp = Blueprint("chat_api", __name__)


@chat_api_bp.post("/message")
@jwt_required()
@csrf_protected
def send_message():
    payload = request.get_json(silent=True) or {}
    try:
        data = ChatRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_failed(exc)
    result = chatbot_service.send_message(
        int(get_jwt_identity()),
        [m.model_dump() for m in data.messages],
        support_type=data.support_type,
        personality_type=data.personality_type,
        custom_instructions=data.custom_instructions,
    )
    reply = ChatReply(content=result["content"], remaining=result["remaining"], fallback=result["fallback"])
    return jsonify({"ok": True, **reply.model_dump(), "check_in_id": result["check_in_id"]})


@chat_api_bp.get("/usage")
@jwt_required()
def usage():
    status = usage_service.usage_status(int(get_jwt_identity()))
    return jsonify({"ok": True, **UsageResponse(**status).model_dump()})
