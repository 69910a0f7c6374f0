"""Flask app serving the badge cards."""

import logging
from typing import Optional

from flask import Flask, Response, abort, current_app, jsonify

from github_badges.cards import CardKind, ResponseCache, build_card
from github_badges.config import THEMES, Config
from github_badges.sdk import BadgeClient

logger = logging.getLogger(__name__)

CARD_KINDS = {kind.value: kind for kind in CardKind}


def _config() -> Config:
    return current_app.extensions["badges_config"]


def _cache() -> ResponseCache:
    return current_app.extensions["badges_cache"]


def create_app(config: Optional[Config] = None) -> Flask:
    """Build the Flask app.

    Args:
        config: Application configuration (loaded from the environment if omitted)
    """
    config = config or Config.from_env()

    app = Flask(__name__)
    app.extensions["badges_config"] = config
    app.extensions["badges_cache"] = ResponseCache(config.cache_ttl_seconds)

    @app.route("/api/<card>", methods=["GET"])
    @app.route("/api/<card>/<theme>", methods=["GET"])
    async def card(card: str, theme: Optional[str] = None):
        kind = CARD_KINDS.get(card)
        theme = theme or _config().default_theme
        if kind is None or theme not in THEMES:
            abort(404)

        cache = _cache()
        response = cache.get(kind, theme)
        if response is None:
            response = await build_card(kind, theme, _config())
            cache.put(kind, theme, response)
        else:
            logger.debug("Serving cached %s card (%s)", kind.value, theme)

        return Response(response.body, status=response.status_code, headers=response.headers)

    @app.route("/api/limits", methods=["GET"])
    async def limits():
        try:
            async with BadgeClient(_config()) as client:
                resources = await client.rate_limits()
        except Exception as e:
            logger.exception("Failed to fetch rate limits")
            return jsonify({"error": str(e)}), 502

        return jsonify(
            {
                "resources": [
                    {
                        "name": r.name,
                        "limit": r.limit,
                        "remaining": r.remaining,
                        "used": r.used,
                        "usage_percent": round(r.usage_percent, 2),
                        "reset": r.reset.isoformat(),
                    }
                    for r in resources
                ]
            }
        )

    @app.route("/healthz", methods=["GET"])
    def healthz():
        config = _config()
        return jsonify(
            {
                "ok": True,
                "token_configured": config.is_authenticated,
                "username_configured": config.has_username,
                "cache_ttl_seconds": config.cache_ttl_seconds,
            }
        )

    return app
