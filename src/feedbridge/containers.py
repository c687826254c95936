"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from feedbridge.adapters.supabase_baby_repository import SupabaseBabyRepository
from feedbridge.adapters.supabase_consent_storage import SupabaseConsentStorage
from feedbridge.adapters.supabase_health_sample_repository import (
    SupabaseHealthSampleRepository,
)
from feedbridge.adapters.supabase_identity_provider import (
    IdentityProvider,
    SupabaseIdentityProvider,
)
from feedbridge.adapters.supabase_preferences_repository import (
    SupabasePreferencesRepository,
)
from feedbridge.adapters.supabase_snapshot_source import PollingSnapshotSource
from feedbridge.config import Settings
from feedbridge.services.accounts import AccountService
from feedbridge.services.babies import BabyService
from feedbridge.services.consent import ConsentService
from feedbridge.services.dashboard import DashboardService
from feedbridge.services.health_samples import HealthSampleService
from feedbridge.services.live_sync import SnapshotSource
from feedbridge.services.preferences import PreferencesService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    identity_provider: IdentityProvider
    baby_service: BabyService
    preferences_service: PreferencesService
    dashboard_service: DashboardService
    health_sample_service: HealthSampleService
    consent_service: ConsentService
    account_service: AccountService
    snapshot_source: SnapshotSource


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    baby_repository = SupabaseBabyRepository(supabase_client)
    preferences_repository = SupabasePreferencesRepository(supabase_client)
    health_sample_repository = SupabaseHealthSampleRepository(supabase_client)
    baby_service = BabyService(baby_repository)
    preferences_service = PreferencesService(
        preferences_repository,
        default_timezone=resolved_settings.default_timezone,
    )
    dashboard_service = DashboardService(
        baby_service=baby_service,
        preferences_service=preferences_service,
        window_days=resolved_settings.chart_window_days,
        alert_days=resolved_settings.alert_window_days,
    )
    account_service = AccountService(
        baby_service=baby_service,
        health_sample_repository=health_sample_repository,
        preferences_repository=preferences_repository,
    )

    return AppContainer(
        settings=resolved_settings,
        identity_provider=SupabaseIdentityProvider(supabase_client),
        baby_service=baby_service,
        preferences_service=preferences_service,
        dashboard_service=dashboard_service,
        health_sample_service=HealthSampleService(health_sample_repository),
        consent_service=ConsentService(
            SupabaseConsentStorage(
                supabase_client, bucket=resolved_settings.consent_bucket
            )
        ),
        account_service=account_service,
        snapshot_source=PollingSnapshotSource(
            supabase_client,
            interval_seconds=resolved_settings.sync_poll_interval_seconds,
        ),
    )
