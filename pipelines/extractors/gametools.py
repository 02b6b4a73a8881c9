"""
Gametools Extractor

Fetches Battlefield 6 player statistics from the gametools.network API.
"""

from typing import Any, Optional, Sequence

from core.resilience import ResilientHTTPClient, gametools_circuit
from core.settings import settings
from pipelines.extractors.base import BaseExtractor

# Provider-side cap on /multiple/ requests
MAX_BATCH_SIZE = 128


class GametoolsExtractor(BaseExtractor):
    """
    Extractor for the gametools.network BF6 API.

    Provides methods to fetch:
    - Full stats for one player (GET /stats/?playerid=ID)
    - Summary stats for up to 128 players (POST /multiple/)

    Transport failures are retried by the HTTP client. A well-formed
    response carrying an "errors" envelope is returned as "no data" and is
    never retried.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        http_client: Optional[ResilientHTTPClient] = None,
    ):
        super().__init__("gametools")
        self.base_url = (base_url or settings.provider_base_url).rstrip("/")
        self.http = http_client or ResilientHTTPClient(
            max_retries=settings.retry_max_attempts,
            base_delay=settings.retry_base_delay,
            max_delay=settings.retry_max_delay,
            timeout=settings.http_timeout,
            circuit_breaker=gametools_circuit,
        )

    def get_player_stats(self, player_id: str) -> Optional[dict]:
        """
        Fetch the raw stats object for one player.

        Returns:
            The provider's JSON object, or None for an error envelope or an
            empty/non-object body

        Raises:
            NetworkError, ServerError, RateLimitError, ClientError,
            CircuitBreakerError: transport-level failures
            ValueError: the body is not JSON
        """
        self.log.debug("request_start", endpoint="stats", player_id=player_id)

        response = self.http.get(f"{self.base_url}/stats/", params={"playerid": player_id})
        data = response.json()

        if not data or not isinstance(data, dict):
            self.log.warning("empty_response", endpoint="stats", player_id=player_id)
            return None

        if data.get("errors"):
            self.log.warning(
                "provider_error_envelope",
                endpoint="stats",
                player_id=player_id,
                errors=data["errors"],
            )
            return None

        self.log.info("request_complete", endpoint="stats", player_id=player_id)
        return data

    def get_multiple_players(self, player_ids: Sequence[str]) -> Any:
        """
        Fetch the raw batch body for up to MAX_BATCH_SIZE players.

        Returns:
            The decoded body (normally a list), or [] for an error envelope
        """
        self.log.debug("request_start", endpoint="multiple", player_count=len(player_ids))

        response = self.http.post(
            f"{self.base_url}/multiple/",
            json={"playerIds": list(player_ids)},
        )
        data = response.json()

        if isinstance(data, dict) and data.get("errors"):
            self.log.warning(
                "provider_error_envelope",
                endpoint="multiple",
                errors=data["errors"],
            )
            return []

        self.log.info(
            "request_complete",
            endpoint="multiple",
            player_count=len(data) if isinstance(data, list) else 0,
        )
        return data
