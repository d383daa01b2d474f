# services/session_service.py
"""
session_service.py

SessionStore owns the operator's authentication session.

Lifecycle:
    UNAUTHENTICATED --login()--> AUTHENTICATING --ok--> AUTHENTICATED
    AUTHENTICATING  --rejected--> previous state (nothing persisted)
    AUTHENTICATED   --logout()--> UNAUTHENTICATED

The credential is persisted through DataRepository so rehydrate() can restore
an AUTHENTICATED session at startup without touching the network. The profile
is always fetched in the background; failing to get it leaves profile=None.
A 401 on later calls does not end the session, only logout() does.
"""

import asyncio
import logging

from billing.data.repository import DataRepository
from billing.models.session import Session, SessionState, UserProfile
from billing.services.api_client import ApiClient, BillingError, NetworkError
from billing.utils.results import RequestVersions, Result

logger = logging.getLogger(__name__)

PROFILE = "profile"


class SessionStore:
    def __init__(self, repo: DataRepository, versions: RequestVersions | None = None):
        self.repo = repo
        self.api: ApiClient | None = None
        self.versions = versions or RequestVersions()
        self.profile_task: asyncio.Task | None = None
        self._session = Session()

    def bind(self, api: ApiClient) -> None:
        # The client reads credentials back from this store, so the two are
        # wired after both exist.
        self.api = api

    @property
    def credential(self) -> str | None:
        return self._session.credential

    def current_session(self) -> Session:
        return self._session

    def rehydrate(self) -> Session:
        token = self.repo.get_credential()
        if token:
            self._session = Session(credential=token, state=SessionState.AUTHENTICATED)
            logger.info("Session restored from local storage")
        else:
            self._session = Session()
        return self._session

    async def login(self, identifier: str, secret: str) -> Session:
        previous = self._session
        self._session = Session(
            credential=previous.credential,
            profile=previous.profile,
            state=SessionState.AUTHENTICATING,
        )
        try:
            token = await self.api.authenticate(identifier, secret)
        except BillingError:
            self._session = previous
            logger.warning("Login failed for %s", identifier)
            raise

        self.repo.save_credential(token)
        self._session = Session(credential=token, state=SessionState.AUTHENTICATED)
        logger.info("Login succeeded for %s", identifier)

        self.schedule_profile()
        return self._session

    def schedule_profile(self) -> asyncio.Task:
        # one background fetch at a time; the newer one supersedes the older
        previous = self.profile_task
        if previous is not None and not previous.done():
            previous.cancel()
        self.profile_task = asyncio.create_task(self.refresh_profile())
        return self.profile_task

    def logout(self) -> None:
        self.repo.clear_credential()
        # any profile fetch still in flight belongs to the old session
        self.versions.invalidate(PROFILE)
        self._session = Session()
        logger.info("Logged out")

    async def refresh_profile(self) -> Result[UserProfile]:
        if not self._session.is_authenticated:
            return Result.failure(BillingError("Not authenticated"))

        version = self.versions.issue(PROFILE)
        try:
            data = await self.api.me()
            profile = UserProfile.from_api(data or {})
        except BillingError as e:
            logger.warning("Profile fetch failed: %s", e)
            return self._profile_failed(version, e)
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning("Malformed profile payload: %s", e)
            return self._profile_failed(version, NetworkError(f"Malformed profile payload: {e}"))

        if not self.versions.is_current(PROFILE, version):
            logger.debug("Discarding stale profile response")
            return Result.discarded(profile)

        self._set_profile(profile)
        return Result.success(profile)

    def _profile_failed(self, version: int, error: BillingError) -> Result[UserProfile]:
        if self.versions.is_current(PROFILE, version):
            self._set_profile(None)
        return Result.failure(error)

    def _set_profile(self, profile: UserProfile | None) -> None:
        current = self._session
        self._session = Session(credential=current.credential, profile=profile, state=current.state)
