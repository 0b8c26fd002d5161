"""Place search against Nominatim, for the origin/destination inputs."""

from __future__ import annotations

import httpx

from .config import Settings
from .errors import GeocodingError
from .models import Place

USER_AGENT = "closure-routing/0.1"


class NominatimClient:
    def __init__(self, settings: Settings, http: httpx.AsyncClient | None = None) -> None:
        self.url = settings.nominatim_url
        self._http = http or httpx.AsyncClient(timeout=settings.http_timeout)

    async def search(self, text: str, limit: int = 5) -> list[Place]:
        """Return up to ``limit`` candidate places for free text."""
        if not text.strip():
            return []
        try:
            resp = await self._http.get(
                self.url,
                params={"q": text, "format": "json", "addressdetails": 1, "limit": limit},
                headers={"User-Agent": USER_AGENT},
            )
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            raise GeocodingError(f"Place search failed: {e}") from e
        except ValueError as e:
            raise GeocodingError(f"Place search returned invalid JSON: {e}") from e

        try:
            return [
                Place(display_name=r.get("display_name", ""), lon=float(r["lon"]), lat=float(r["lat"]))
                for r in data
            ]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise GeocodingError(f"Unexpected place search response: {e!r}") from e

    async def aclose(self) -> None:
        await self._http.aclose()
