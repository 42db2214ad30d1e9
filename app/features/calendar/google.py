# Calendar Feature - Google Calendar client

from typing import Any, Callable, Dict, List, Optional
from fastapi.concurrency import run_in_threadpool
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from googleapiclient.discovery import build
from app.config import settings
from app.features.auth.models import User
from app.core.logging import logger


SCOPES = [
    "https://www.googleapis.com/auth/calendar",
    "https://www.googleapis.com/auth/calendar.events",
]
AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
TOKEN_URI = "https://oauth2.googleapis.com/token"
DEFAULT_CALENDAR_ID = "primary"


class CalendarSyncError(Exception):
    """A call to Google Calendar failed."""


class GoogleCalendarService:
    """Google Calendar v3 access on behalf of one doctor."""

    def __init__(self, user: User):
        self.user = user
        self.credentials = Credentials(
            token=user.google_access_token,
            refresh_token=user.google_refresh_token,
            token_uri=TOKEN_URI,
            client_id=settings.GOOGLE_CLIENT_ID,
            client_secret=settings.GOOGLE_CLIENT_SECRET,
            scopes=SCOPES,
            expiry=user.google_token_expiry,
        )
        self._client = None

    @property
    def calendar_id(self) -> str:
        return self.user.google_calendar_id or DEFAULT_CALENDAR_ID

    def get_client(self):
        """Get or create the discovery client."""
        if self._client is None:
            self._client = build("calendar", "v3", credentials=self.credentials, cache_discovery=False)
        return self._client

    async def _execute(self, action: str, request: Callable[[Any], Any]) -> Any:
        """
        Run a blocking API call in the threadpool.

        Args:
            action: What the call does, for logs and the error message
            request: Builds the request from the client

        Raises:
            CalendarSyncError: On any client or transport failure
        """
        try:
            result = await run_in_threadpool(lambda: request(self.get_client()).execute())
        except Exception as e:
            logger.error(f"Google Calendar: failed to {action} for user {self.user.id}: {e}")
            raise CalendarSyncError(f"Failed to {action}") from e

        await self._store_refreshed_token()
        return result

    async def _store_refreshed_token(self) -> None:
        """Persist the access token if the client refreshed it during a call."""
        if not self.credentials.token or self.credentials.token == self.user.google_access_token:
            return

        self.user.google_access_token = self.credentials.token
        self.user.google_token_expiry = self.credentials.expiry
        self.user.update_timestamp()
        try:
            await self.user.save()
        except Exception as e:
            # The token is refreshed again on the next call
            logger.warning(f"Could not store refreshed Google token for user {self.user.id}: {e}")
            return
        logger.info(f"Refreshed Google Calendar token for user {self.user.id}")

    async def create_event(self, event: Dict[str, Any]) -> str:
        created = await self._execute(
            "create calendar event",
            lambda client: client.events().insert(calendarId=self.calendar_id, body=event),
        )
        return created["id"]

    async def update_event(self, event_id: str, event: Dict[str, Any]) -> None:
        await self._execute(
            "update calendar event",
            lambda client: client.events().update(calendarId=self.calendar_id, eventId=event_id, body=event),
        )

    async def delete_event(self, event_id: str) -> None:
        await self._execute(
            "delete calendar event",
            lambda client: client.events().delete(calendarId=self.calendar_id, eventId=event_id),
        )

    async def list_events(self, time_min: str, time_max: str) -> List[Dict[str, Any]]:
        response = await self._execute(
            "fetch calendar events",
            lambda client: client.events().list(
                calendarId=self.calendar_id,
                timeMin=time_min,
                timeMax=time_max,
                singleEvents=True,
                orderBy="startTime",
            ),
        )
        return response.get("items", [])

    async def list_calendars(self) -> List[Dict[str, Any]]:
        response = await self._execute(
            "fetch calendars",
            lambda client: client.calendarList().list(),
        )
        return response.get("items", [])

    # ============== OAuth ==============

    @staticmethod
    def oauth_flow(state: Optional[str] = None) -> Flow:
        """Build the web-server OAuth flow from the configured client credentials."""
        if not settings.google_calendar_configured:
            raise CalendarSyncError("Google Calendar is not configured")

        client_config = {
            "web": {
                "client_id": settings.GOOGLE_CLIENT_ID,
                "client_secret": settings.GOOGLE_CLIENT_SECRET,
                "auth_uri": AUTH_URI,
                "token_uri": TOKEN_URI,
                "redirect_uris": [settings.GOOGLE_REDIRECT_URI],
            }
        }
        # The code is exchanged by a fresh flow in the callback, so no PKCE verifier
        return Flow.from_client_config(
            client_config,
            scopes=SCOPES,
            state=state,
            redirect_uri=settings.GOOGLE_REDIRECT_URI,
            autogenerate_code_verifier=False,
        )

    @staticmethod
    def get_authorization_url(state: str) -> str:
        """Consent URL requesting offline access to the doctor's calendars."""
        flow = GoogleCalendarService.oauth_flow(state)
        auth_url, _ = flow.authorization_url(access_type="offline", prompt="consent")
        return auth_url

    @staticmethod
    async def exchange_code(code: str) -> Credentials:
        """Trade an authorization code for access and refresh tokens."""
        flow = GoogleCalendarService.oauth_flow()
        try:
            await run_in_threadpool(flow.fetch_token, code=code)
        except Exception as e:
            logger.error(f"Google Calendar: failed to exchange authorization code: {e}")
            raise CalendarSyncError("Failed to obtain access token") from e
        return flow.credentials
