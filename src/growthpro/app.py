"""Summary: Application factory wiring the store and viewer-scoped services.

Importance: Centralizes dependency creation for the CLI and the HTTP API.
Alternatives: Instantiate services manually in each entrypoint.
"""

from __future__ import annotations

from dataclasses import dataclass

from growthpro.composer import MessageComposer
from growthpro.config import AppConfig
from growthpro.models import Viewer
from growthpro.notifications import Notifier
from growthpro.services import MessagingService
from growthpro.storage.sqlite_store import SqliteStore
from growthpro.welcome import WelcomeEmailClient


@dataclass(frozen=True)
class AppContext:
    """Summary: Shared application context for building viewer services.

    Importance: Reuses storage, its change feed, and notices across viewers.
    Alternatives: Rebuild dependencies for every request.
    """

    store: SqliteStore
    config: AppConfig
    notifier: Notifier

    def resolve_viewer(self, viewer_id: str) -> Viewer:
        """Summary: Build a viewer from a stored profile.

        Importance: Role comes from the profile record, never from the caller.
        Alternatives: Trust a role claim sent by the client.
        """

        profile = self.store.get_profile(viewer_id)
        if profile is None:
            raise LookupError(f"Unknown viewer: {viewer_id}")
        return Viewer(id=profile.id, role=profile.role or "client")

    def services_for_viewer(self, viewer_id: str) -> "AppServices":
        viewer = self.resolve_viewer(viewer_id)
        messaging = MessagingService(
            store=self.store,
            viewer=viewer,
            notifier=self.notifier,
            hourly_limit=self.config.hourly_message_limit,
        )
        return AppServices(
            messaging=messaging,
            welcome=self.welcome_client(),
            store=self.store,
            viewer=viewer,
        )

    def welcome_client(self) -> WelcomeEmailClient:
        return WelcomeEmailClient(
            url=self.config.welcome_email_url, api_key=self.config.welcome_email_key
        )


@dataclass(frozen=True)
class AppServices:
    """Summary: Bundle of services for one viewer.

    Importance: Simplifies passing dependencies to the CLI or API handlers.
    Alternatives: Use a dependency injection container.
    """

    messaging: MessagingService
    welcome: WelcomeEmailClient
    store: SqliteStore
    viewer: Viewer

    def composer(
        self,
        reply_to_subject: str | None = None,
        reply_to_thread: str | None = None,
        reply_to_participant: str | None = None,
    ) -> MessageComposer:
        return MessageComposer(
            self.messaging,
            reply_to_subject=reply_to_subject,
            reply_to_thread=reply_to_thread,
            reply_to_participant=reply_to_participant,
        )


def build_context(config: AppConfig) -> AppContext:
    """Summary: Build shared context for viewer-scoped services.

    Importance: Creates and initializes the store once per process.
    Alternatives: Construct dependencies separately per request.
    """

    store = SqliteStore(
        config.db_path,
        hourly_limit=config.hourly_message_limit,
        conversation_rpc=config.conversation_rpc_enabled,
    )
    store.initialize()
    return AppContext(store=store, config=config, notifier=Notifier(history=config.notice_history))
