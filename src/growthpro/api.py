"""Summary: FastAPI application for GrowthPro messaging.

Importance: Exposes the messaging service to dashboard clients over HTTP.
Alternatives: Use a CLI-only workflow or a different web framework.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from growthpro.app import AppServices, build_context
from growthpro.config import AppConfig
from growthpro.errors import NotAuthorized, RateLimitExceeded, StoreError, ValidationError
from growthpro.models import Participant


class ProfileRequest(BaseModel):
    """Summary: Request payload for creating or updating a profile.

    Importance: Registers admins and clients that can exchange messages.
    Alternatives: Sync profiles from the auth provider.
    """

    id: str = Field(min_length=1)
    full_name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    role: str = Field(default="client", pattern="^(client|admin|super_admin)$")


class SendRequest(BaseModel):
    """Summary: Request payload for sending a message.

    Importance: Carries direct targets or broadcast recipients in one shape.
    Alternatives: Separate endpoints for direct and broadcast sends.
    """

    subject: str
    content: str
    message_type: str = "direct"
    recipient_ids: list[str] = Field(default_factory=list)
    priority: str = "normal"
    thread_id: str | None = None


class WelcomeRequest(BaseModel):
    """Request payload for sending a welcome email to a profile."""

    password: str | None = None
    additional_data: dict[str, Any] = Field(default_factory=dict)


def create_app(config: AppConfig) -> FastAPI:
    """Summary: Create a FastAPI app wired to GrowthPro services.

    Importance: Ensures the API layer shares the same configuration and storage.
    Alternatives: Instantiate services globally outside the factory.
    """

    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=config.log_level, format="%(levelname)s %(name)s: %(message)s"
        )
    app = FastAPI(title="GrowthPro Messaging API", version="0.1.0")
    context = build_context(config)
    app.state.context = context

    @app.exception_handler(ValidationError)
    def handle_validation(_: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": exc.errors})

    @app.exception_handler(RateLimitExceeded)
    def handle_rate_limit(_: Request, exc: RateLimitExceeded) -> JSONResponse:
        return JSONResponse(status_code=429, content={"detail": str(exc)})

    @app.exception_handler(NotAuthorized)
    def handle_not_authorized(_: Request, exc: NotAuthorized) -> JSONResponse:
        return JSONResponse(status_code=403, content={"detail": str(exc)})

    @app.exception_handler(StoreError)
    def handle_store_error(_: Request, exc: StoreError) -> JSONResponse:
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    def require_api_key(x_api_key: str | None = Header(default=None)) -> None:
        """Summary: Enforce API key authentication when configured.

        Importance: Adds a minimal security layer for local and private deployments.
        Alternatives: Use OAuth or session-based authentication.
        """

        if not config.api_key:
            return
        if x_api_key != config.api_key:
            raise HTTPException(status_code=401, detail="Invalid API key")

    def viewer_services(
        x_viewer_id: str | None = Header(default=None),
        _: None = Depends(require_api_key),
    ) -> AppServices:
        """Summary: Resolve the calling viewer's services from the X-Viewer-Id header.

        Importance: Every messaging endpoint is scoped to an explicit, known profile.
        Alternatives: Decode the viewer from a session token.
        """

        if not x_viewer_id:
            raise HTTPException(status_code=401, detail="Missing viewer")
        try:
            return context.services_for_viewer(x_viewer_id)
        except LookupError as exc:
            raise HTTPException(status_code=401, detail=str(exc)) from exc

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/profiles", dependencies=[Depends(require_api_key)])
    def upsert_profile(payload: ProfileRequest) -> dict[str, str]:
        profile_id = context.store.upsert_profile(
            Participant(
                id=payload.id, full_name=payload.full_name, email=payload.email, role=payload.role
            )
        )
        return {"id": profile_id}

    @app.get("/profiles", dependencies=[Depends(require_api_key)])
    def list_profiles(role: str | None = None) -> list[dict[str, Any]]:
        return [asdict(profile) for profile in context.store.list_profiles(role)]

    @app.post("/profiles/{profile_id}/welcome")
    def send_welcome(
        profile_id: str, payload: WelcomeRequest, services: AppServices = Depends(viewer_services)
    ) -> dict[str, Any]:
        """Summary: Send the onboarding email to a profile.

        Importance: Staff trigger credentials delivery for newly created clients.
        Alternatives: Send welcome emails from a database trigger.
        """

        if not services.viewer.is_admin:
            raise NotAuthorized("Only staff members can send welcome emails")
        profile = services.store.get_profile(profile_id)
        if profile is None:
            raise HTTPException(status_code=404, detail="Profile not found")
        result = services.welcome.send(
            profile.email, profile.full_name, payload.password, payload.additional_data
        )
        return asdict(result)

    @app.get("/messages")
    def list_messages(services: AppServices = Depends(viewer_services)) -> list[dict[str, Any]]:
        messages = services.messaging.fetch_messages()
        if services.messaging.state.status == "error":
            raise HTTPException(status_code=503, detail=services.messaging.state.error)
        return [asdict(message) for message in messages]

    @app.post("/messages")
    def send_message(
        payload: SendRequest, services: AppServices = Depends(viewer_services)
    ) -> list[dict[str, Any]]:
        """Summary: Send a message as the viewer.

        Importance: Applies validation, the cached quota check, and the store's quota guard.
        Alternatives: Accept only single-recipient sends.
        """

        services.messaging.fetch_rate_limit()
        composer = services.composer(reply_to_thread=payload.thread_id)
        composer.set_subject(payload.subject)
        composer.set_content(payload.content)
        composer.select_recipients(payload.recipient_ids)
        composer.draft.priority = payload.priority
        composer.draft.message_type = payload.message_type
        sent = composer.send()
        if sent is None:
            raise ValidationError(composer.errors)
        return [asdict(message) for message in sent]

    @app.post("/messages/{message_id}/read")
    def mark_read(message_id: str, services: AppServices = Depends(viewer_services)) -> dict[str, bool]:
        return {"changed": services.messaging.mark_as_read(message_id)}

    @app.get("/threads")
    def list_threads(services: AppServices = Depends(viewer_services)) -> list[dict[str, Any]]:
        return [_thread_payload(thread) for thread in services.messaging.fetch_threads()]

    @app.get("/threads/{thread_id}")
    def open_thread(thread_id: str, services: AppServices = Depends(viewer_services)) -> dict[str, Any]:
        services.messaging.fetch_threads()
        thread = services.messaging.open_thread(thread_id)
        if thread is None:
            raise HTTPException(status_code=404, detail="Thread not found")
        return _thread_payload(thread)

    @app.get("/conversations")
    def list_conversations(services: AppServices = Depends(viewer_services)) -> list[dict[str, Any]]:
        if not services.viewer.is_admin:
            raise NotAuthorized("Only staff members can list conversations")
        return [asdict(summary) for summary in services.messaging.fetch_conversations()]

    @app.get("/conversations/{participant_id}")
    def participant_thread(
        participant_id: str, services: AppServices = Depends(viewer_services)
    ) -> dict[str, Any]:
        thread = services.messaging.get_thread(participant_id)
        if thread is None:
            raise HTTPException(status_code=404, detail="Conversation not found")
        return _thread_payload(thread)

    @app.get("/stats")
    def stats(services: AppServices = Depends(viewer_services)) -> dict[str, Any]:
        messaging = services.messaging
        messaging.fetch_messages()
        messaging.fetch_conversations()
        snapshot = messaging.fetch_stats()
        payload = asdict(snapshot)
        payload["recent"] = [message["id"] for message in payload["recent"]]
        return payload

    @app.get("/rate-limit")
    def rate_limit(services: AppServices = Depends(viewer_services)) -> dict[str, Any]:
        info = services.messaging.fetch_rate_limit()
        if info is None:
            raise HTTPException(status_code=503, detail="Rate limit unavailable")
        return asdict(info)

    @app.get("/notices", dependencies=[Depends(require_api_key)])
    def notices(limit: int = 20) -> list[dict[str, Any]]:
        return [asdict(notice) for notice in context.notifier.history()[-limit:]]

    return app


def _thread_payload(thread: Any) -> dict[str, Any]:
    payload = asdict(thread)
    payload["last_message_id"] = thread.last_message.id
    return payload


def create_default_app() -> FastAPI:
    """Summary: Build the app from environment configuration.

    Importance: Factory target for ASGI servers run in factory mode.
    Alternatives: Create the app at import time.
    """

    return create_app(AppConfig.from_env())
