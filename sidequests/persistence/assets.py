"""Asset Host - Resolves sidequest art and sound names to URLs."""

from __future__ import annotations

from ..config import SIDEQUESTS_ASSET_BASE_URL


class AssetHost:
    """
    Maps (game_id, asset_name) to a URL under a base.

    Overrides take precedence and may point anywhere (a CDN, a bucket).
    Resolution never fails: an unknown asset still gets a URL, the
    client decides what a 404 looks like.

    Usage:
        assets = AssetHost(overrides={("lab-escape", "door.png"): "https://cdn/door.png"})
        assets.url("lab-escape", "door.png")
    """

    def __init__(
        self,
        base_url: str | None = None,
        overrides: dict[tuple[str, str], str] | None = None,
    ):
        self.base_url = (base_url if base_url is not None else SIDEQUESTS_ASSET_BASE_URL).rstrip("/")
        self.overrides = dict(overrides or {})

    def url(self, game_id: str, asset_name: str) -> str:
        override = self.overrides.get((game_id, asset_name))
        if override:
            return override
        return f"{self.base_url}/{game_id}/{asset_name.lstrip('/')}"

    def override(self, game_id: str, asset_name: str, url: str):
        self.overrides[(game_id, asset_name)] = url
