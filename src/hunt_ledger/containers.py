"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import Client, create_client

from hunt_ledger.adapters.local_blob_store import LocalBlobStore
from hunt_ledger.adapters.supabase_blob_store import SupabaseBlobStore
from hunt_ledger.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from hunt_ledger.adapters.supabase_submission_repository import (
    SupabaseSubmissionRepository,
)
from hunt_ledger.adapters.supabase_team_repository import SupabaseTeamRepository
from hunt_ledger.config import Settings
from hunt_ledger.services.blobs import BlobStore
from hunt_ledger.services.coordinator import SessionCoordinator
from hunt_ledger.services.submissions import SubmissionLedger
from hunt_ledger.services.teams import TeamRegistry


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    team_registry: TeamRegistry
    submission_ledger: SubmissionLedger
    session_coordinator: SessionCoordinator


def build_blob_store(settings: Settings, client: Client) -> BlobStore:
    """Select the blob backend named in settings."""
    if settings.blob_backend == "supabase":
        return SupabaseBlobStore(client=client, bucket=settings.supabase_photos_bucket)
    return LocalBlobStore.create(settings.photos_dir)


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    session_repository = SupabaseSessionRepository(supabase_client)
    team_repository = SupabaseTeamRepository(supabase_client)
    submission_repository = SupabaseSubmissionRepository(supabase_client)
    blob_store = build_blob_store(resolved_settings, supabase_client)

    team_registry = TeamRegistry(team_repository)
    submission_ledger = SubmissionLedger(
        repository=submission_repository,
        blob_store=blob_store,
        team_repository=team_repository,
        session_repository=session_repository,
        orphan_grace=resolved_settings.orphan_grace,
    )
    session_coordinator = SessionCoordinator(
        session_repository=session_repository,
        team_registry=team_registry,
        submission_ledger=submission_ledger,
        initial_status=resolved_settings.initial_session_status,
        access_code_length=resolved_settings.access_code_length,
        access_code_attempts=resolved_settings.access_code_attempts,
    )
    return AppContainer(
        settings=resolved_settings,
        team_registry=team_registry,
        submission_ledger=submission_ledger,
        session_coordinator=session_coordinator,
    )
