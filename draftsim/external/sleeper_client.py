"""
Sleeper API client for historical draft records.

Fetches leagues, drafts, picks and users from Sleeper's REST API and turns
a finished Sleeper draft into the DraftRecord format the profile and
behavior builders consume. This is the only async code in the package;
everything downstream of the fetch is synchronous.
"""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional, Tuple

import httpx

from ..datamodels.draft_record import DraftRecord

logger = logging.getLogger(__name__)


class SleeperAPIError(Exception):
    """Custom exception for Sleeper API errors."""
    pass


class SleeperRateLimitError(SleeperAPIError):
    """Raised when hitting Sleeper API rate limits."""
    pass


class SleeperClient:
    """
    Async client for Sleeper API with rate limiting and error handling.

    Retries 429 and 5xx responses and transport errors with exponential
    backoff; a 404 is returned as None.
    """

    BASE_URL = "https://api.sleeper.app/v1"

    def __init__(self,
                 timeout: float = 10.0,
                 max_retries: int = 3,
                 rate_limit_delay: float = 1.0,
                 backoff_base: float = 1.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize Sleeper API client.

        Args:
            timeout: Request timeout in seconds
            max_retries: Maximum number of retries for failed requests
            rate_limit_delay: Delay between requests to respect rate limits
            backoff_base: Seconds for the first retry wait, doubled per attempt
            transport: Optional httpx transport (used by tests)
        """
        self.timeout = timeout
        self.max_retries = max_retries
        self.rate_limit_delay = rate_limit_delay
        self.backoff_base = backoff_base
        self._last_request_time = 0.0

        self.client = httpx.AsyncClient(
            base_url=self.BASE_URL,
            timeout=httpx.Timeout(timeout),
            headers={
                "User-Agent": "draftsim/1.0.0",
                "Accept": "application/json",
            },
            limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        await self.client.aclose()

    async def _make_request(self, endpoint: str, **kwargs) -> Any:
        """
        Make a request to Sleeper API with rate limiting and retries.

        Args:
            endpoint: API endpoint (e.g., "/league/123/drafts")
            **kwargs: Additional arguments for httpx.get()

        Returns:
            Decoded JSON, or None on 404

        Raises:
            SleeperAPIError: For API errors
            SleeperRateLimitError: For rate limit errors
        """
        now = time.time()
        time_since_last = now - self._last_request_time
        if time_since_last < self.rate_limit_delay:
            await asyncio.sleep(self.rate_limit_delay - time_since_last)

        for attempt in range(self.max_retries + 1):
            wait_time = self.backoff_base * (2 ** attempt)
            try:
                self._last_request_time = time.time()

                response = await self.client.get(endpoint, **kwargs)

                if response.status_code == 429:
                    if attempt < self.max_retries:
                        logger.warning(f"Rate limited, waiting {wait_time}s before retry")
                        await asyncio.sleep(wait_time)
                        continue
                    raise SleeperRateLimitError("Rate limit exceeded")

                if response.status_code == 404:
                    return None

                response.raise_for_status()
                return response.json()

            except httpx.HTTPStatusError as e:
                if attempt < self.max_retries and e.response.status_code >= 500:
                    logger.warning(f"Server error {e.response.status_code}, retrying in {wait_time}s")
                    await asyncio.sleep(wait_time)
                    continue
                raise SleeperAPIError(f"HTTP {e.response.status_code}: {e.response.text}")

            except httpx.RequestError as e:
                if attempt < self.max_retries:
                    logger.warning(f"Request error {e}, retrying in {wait_time}s")
                    await asyncio.sleep(wait_time)
                    continue
                raise SleeperAPIError(f"Request failed: {e}")

        raise SleeperAPIError("Max retries exceeded")

    async def get_league_info(self, league_id: str) -> Optional[Dict[str, Any]]:
        logger.info(f"Fetching league info for: {league_id}")

        try:
            league_data = await self._make_request(f"/league/{league_id}")
            if league_data:
                logger.info(f"Found league: {league_data.get('name')} ({league_data.get('season')})")
            return league_data

        except SleeperAPIError as e:
            logger.error(f"Error fetching league {league_id}: {e}")
            raise

    async def get_league_users(self, league_id: str) -> List[Dict[str, Any]]:
        logger.info(f"Fetching users for league: {league_id}")

        try:
            users = await self._make_request(f"/league/{league_id}/users")
            return users or []

        except SleeperAPIError as e:
            logger.error(f"Error fetching users for league {league_id}: {e}")
            raise

    async def get_league_drafts(self, league_id: str) -> List[Dict[str, Any]]:
        logger.info(f"Fetching drafts for league: {league_id}")

        try:
            drafts = await self._make_request(f"/league/{league_id}/drafts")
            return drafts or []

        except SleeperAPIError as e:
            logger.error(f"Error fetching drafts for league {league_id}: {e}")
            raise

    async def get_draft_info(self, draft_id: str) -> Optional[Dict[str, Any]]:
        """
        Get draft configuration and metadata.

        Args:
            draft_id: Sleeper draft ID

        Returns:
            Draft info dictionary or None if not found
        """
        logger.info(f"Fetching draft info for: {draft_id}")

        try:
            draft_data = await self._make_request(f"/draft/{draft_id}")
            if draft_data:
                logger.info(f"Found draft: {draft_data.get('status')} - {draft_data.get('type')}")
            return draft_data

        except SleeperAPIError as e:
            logger.error(f"Error fetching draft {draft_id}: {e}")
            raise

    async def get_draft_picks(self, draft_id: str) -> List[Dict[str, Any]]:
        logger.info(f"Fetching draft picks for: {draft_id}")

        try:
            picks_data = await self._make_request(f"/draft/{draft_id}/picks")
            picks_data = picks_data or []

            completed_picks = [pick for pick in picks_data if pick.get("player_id")]
            logger.info(f"Found {len(completed_picks)} completed picks out of {len(picks_data)} total")
            return picks_data

        except SleeperAPIError as e:
            logger.error(f"Error fetching picks for draft {draft_id}: {e}")
            raise

    async def get_draft_data(self, draft_id: str) -> Tuple[Optional[Dict], List[Dict]]:
        """
        Get both draft info and picks in a single call.

        Returns:
            Tuple of (draft_info, draft_picks)
        """
        draft_info, draft_picks = await asyncio.gather(
            self.get_draft_info(draft_id),
            self.get_draft_picks(draft_id),
        )
        return draft_info, draft_picks

    def convert_to_draft_record(self,
                                draft_info: Dict[str, Any],
                                draft_picks: List[Dict[str, Any]],
                                league: str = "") -> DraftRecord:
        """
        Convert Sleeper draft data to a DraftRecord.

        Unfilled picks (no player_id) are skipped. Player details come from
        the pick metadata Sleeper attaches to every completed pick.

        Raises:
            SleeperAPIError: if the payload is missing required fields
        """
        try:
            settings = draft_info["settings"]
            picks = []
            for pick_data in draft_picks:
                if not pick_data.get("player_id"):
                    continue

                metadata = pick_data.get("metadata") or {}
                name = f"{metadata.get('first_name', '')} {metadata.get('last_name', '')}".strip()
                picks.append({
                    "pickNumber": pick_data["pick_no"],
                    "round": pick_data["round"],
                    "draftSlot": pick_data.get("draft_slot", 0),
                    "pickedBy": pick_data.get("picked_by") or str(pick_data.get("roster_id", "")),
                    "player": {
                        "name": name or pick_data["player_id"],
                        "position": metadata.get("position", ""),
                        "team": metadata.get("team") or "",
                    },
                })

            record = DraftRecord.model_validate({
                "draftId": draft_info["draft_id"],
                "year": draft_info.get("season", ""),
                "league": league,
                "draftOrder": draft_info.get("draft_order") or {},
                "picks": picks,
                "settings": {
                    "teams": settings["teams"],
                    "rounds": settings["rounds"],
                    "draftType": draft_info.get("type", "snake"),
                },
            })

        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Error converting draft data: {e}")
            raise SleeperAPIError(f"Failed to convert draft data: {e}")

        logger.info(f"Converted Sleeper draft {record.draft_id}: {len(record.picks)} picks")
        return record

    async def fetch_draft_record(self, draft_id: str, league: str = "") -> Optional[DraftRecord]:
        draft_info, draft_picks = await self.get_draft_data(draft_id)
        if draft_info is None:
            return None
        return self.convert_to_draft_record(draft_info, draft_picks, league)

    async def fetch_league_records(self, league_id: str, league: str = "") -> List[DraftRecord]:
        """Every completed draft of a league as DraftRecords."""
        records = []
        for draft in await self.get_league_drafts(league_id):
            if draft.get("status") != "complete":
                continue
            record = await self.fetch_draft_record(draft["draft_id"], league)
            if record is not None:
                records.append(record)
        return records
