"""Well-known public resources: manifest, robots, sitemap and image policy."""

from __future__ import annotations

from datetime import datetime, timezone
from xml.sax.saxutils import escape

from flask import Blueprint, Response, jsonify, request

from appgallery.backend.app.extensions import get_services
from appgallery.backend.config.image_policy import is_remote_image_allowed, load_image_policy

blueprint = Blueprint("public", __name__)

WEB_MANIFEST = {
    "name": "Gongmyung's App Gallery",
    "short_name": "Gongmyung Apps",
    "description": "Gongmyung - We're just. that kind of group!",
    "start_url": "/",
    "display": "standalone",
    "background_color": "#000000",
    "theme_color": "#fbbf24",
    "orientation": "portrait-primary",
    "icons": [
        {"src": "/icon-192x192.png", "sizes": "192x192", "type": "image/png", "purpose": "any"},
        {"src": "/icon-512x512.png", "sizes": "512x512", "type": "image/png", "purpose": "any"},
        {"src": "/logo.png", "sizes": "192x192", "type": "image/png", "purpose": "any"},
    ],
    "categories": ["productivity", "utilities", "entertainment"],
    "lang": "en",
    "dir": "ltr",
}

# (fragment, change frequency, priority)
SITEMAP_SECTIONS: tuple[tuple[str, str, float], ...] = (
    ("", "daily", 1.0),
    ("#all-apps", "weekly", 0.8),
    ("#new-releases", "weekly", 0.8),
    ("#featured-apps", "weekly", 0.8),
    ("#events", "weekly", 0.8),
    ("#app-stories", "weekly", 0.7),
    ("#news", "weekly", 0.7),
)


@blueprint.get("/manifest.json")
def web_manifest() -> Response:
    response = jsonify(WEB_MANIFEST)
    response.mimetype = "application/manifest+json"
    return response


@blueprint.get("/robots.txt")
def robots_txt() -> Response:
    site_url = get_services().settings.site_url
    body = f"User-agent: *\nAllow: /\nDisallow: /api/\n\nSitemap: {site_url}/sitemap.xml\n"
    return Response(body, mimetype="text/plain")


@blueprint.get("/sitemap.xml")
def sitemap_xml() -> Response:
    site_url = get_services().settings.site_url
    last_modified = datetime.now(timezone.utc).date().isoformat()
    entries = "".join(
        "<url>"
        f"<loc>{escape(f'{site_url}/{fragment}' if fragment else site_url)}</loc>"
        f"<lastmod>{last_modified}</lastmod>"
        f"<changefreq>{frequency}</changefreq>"
        f"<priority>{priority:.1f}</priority>"
        "</url>"
        for fragment, frequency, priority in SITEMAP_SECTIONS
    )
    body = (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'
        f"{entries}</urlset>"
    )
    return Response(body, mimetype="application/xml")


@blueprint.get("/api/public/image-policy")
def image_policy():
    """Expose the remote image allowlist, optionally checking one URL."""

    policy = load_image_policy()
    payload: dict[str, object] = {
        "remote_patterns": [pattern.model_dump() for pattern in policy.remote_patterns],
    }
    url = request.args.get("url")
    if url:
        payload["url"] = url
        payload["allowed"] = is_remote_image_allowed(url, policy)
    return jsonify(payload), 200
