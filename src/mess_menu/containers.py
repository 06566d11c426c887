"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client
from supabase.client import ClientOptions

from mess_menu.adapters.supabase_auth_gateway import SupabaseAuthGateway
from mess_menu.adapters.supabase_feedback_repository import (
    SupabaseFeedbackRepository,
)
from mess_menu.adapters.supabase_image_storage import SupabaseImageStorage
from mess_menu.adapters.supabase_menu_repository import SupabaseMenuRepository
from mess_menu.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from mess_menu.config import Settings
from mess_menu.services.auth import AuthService
from mess_menu.services.feedback import FeedbackService
from mess_menu.services.menu import MenuService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_service: AuthService
    menu_service: MenuService
    feedback_service: FeedbackService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    public_client = create_client(
        resolved_settings.supabase_url,
        resolved_settings.supabase_anon_key,
        options=ClientOptions(auto_refresh_token=False, persist_session=False),
    )
    auth_service = AuthService(
        gateway=SupabaseAuthGateway(
            public_client=public_client, admin_client=supabase_client
        ),
        profile_repository=SupabaseProfileRepository(supabase_client),
    )
    menu_service = MenuService(
        repository=SupabaseMenuRepository(supabase_client),
        image_storage=SupabaseImageStorage(
            supabase_client, bucket=resolved_settings.menu_images_bucket
        ),
        retry_attempts=resolved_settings.menu_fetch_retries,
        retry_delay_seconds=resolved_settings.menu_fetch_retry_delay_seconds,
    )
    feedback_service = FeedbackService(SupabaseFeedbackRepository(supabase_client))
    return AppContainer(
        settings=resolved_settings,
        auth_service=auth_service,
        menu_service=menu_service,
        feedback_service=feedback_service,
    )
