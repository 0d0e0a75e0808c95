"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from neurostack.adapters.file_store import FileKeyValueStore
from neurostack.adapters.local_pharmacy_repository import LocalPharmacyRepository
from neurostack.adapters.local_storage_adapter import LocalStorageAdapter
from neurostack.adapters.logs_api_client import HttpxLogsApiClient, LogsApiClient
from neurostack.adapters.rxterms_client import HttpxRxTermsClient
from neurostack.adapters.supabase_identity_verifier import SupabaseIdentityVerifier
from neurostack.adapters.supabase_log_repository import SupabaseLogRepository
from neurostack.adapters.supabase_storage_adapter import SupabaseStorageAdapter
from neurostack.config import Settings, is_supabase_configured
from neurostack.domain.entries import LogEntry
from neurostack.services.autosave import LogAutosaver
from neurostack.services.cache import InMemoryCache
from neurostack.services.drugs import DrugLookupService
from neurostack.services.logs import IdentityVerifier, LogService
from neurostack.services.pharmacy import PharmacyService
from neurostack.services.selector import StorageSelector


@dataclass
class AppContainer:
    """Holds API server dependencies.

    ``log_service`` and ``identity_verifier`` are None when Supabase is not
    configured; the log routes then refuse every request.
    """

    settings: Settings
    log_service: LogService | None
    identity_verifier: IdentityVerifier | None
    drug_lookup_service: DrugLookupService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the API server container."""
    resolved_settings = settings or Settings()
    log_service = None
    identity_verifier = None
    if is_supabase_configured(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    ):
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_service_key
        )
        log_service = LogService(SupabaseLogRepository(supabase_client))
        identity_verifier = SupabaseIdentityVerifier(supabase_client)
    rxterms_client = HttpxRxTermsClient.create(resolved_settings.rxterms_base_url)
    drug_lookup_service = DrugLookupService(
        client=rxterms_client, cache=InMemoryCache()
    )

    async def close_resources() -> None:
        await rxterms_client.close()

    return AppContainer(
        settings=resolved_settings,
        log_service=log_service,
        identity_verifier=identity_verifier,
        drug_lookup_service=drug_lookup_service,
        close_resources=close_resources,
    )


def build_storage_selector(
    settings: Settings | None = None, api: LogsApiClient | None = None
) -> StorageSelector:
    """Create the client-side storage selector.

    The remote adapter is always built; it reports itself unavailable when
    Supabase settings are missing or still placeholders.
    """
    resolved_settings = settings or Settings()
    store = FileKeyValueStore(resolved_settings.data_dir)
    supabase_client = None
    if is_supabase_configured(
        resolved_settings.supabase_url, resolved_settings.supabase_anon_key
    ):
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_anon_key
        )
    remote = SupabaseStorageAdapter(
        client=supabase_client,
        api=api or HttpxLogsApiClient.create(resolved_settings.api_base_url),
    )
    return StorageSelector(
        local=LocalStorageAdapter(store),
        remote=remote,
        preferences=store,
    )


def build_pharmacy_service(settings: Settings | None = None) -> PharmacyService:
    """Create the pharmacy service over the local data directory."""
    resolved_settings = settings or Settings()
    store = FileKeyValueStore(resolved_settings.data_dir)
    return PharmacyService(LocalPharmacyRepository(store))


def build_autosaver(
    selector: StorageSelector,
    settings: Settings | None = None,
    on_saved: Callable[[LogEntry], None] | None = None,
) -> LogAutosaver:
    """Create a form autosaver over the selected backend."""
    resolved_settings = settings or Settings()
    return LogAutosaver(
        selector.initialize(),
        delay_seconds=resolved_settings.autosave_delay_seconds,
        on_saved=on_saved,
    )
