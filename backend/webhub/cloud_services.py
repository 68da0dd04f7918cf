from __future__ import annotations

from typing import NamedTuple


class CloudService(NamedTuple):
    name: str
    description: str
    url: str
    icon_url: str


_ICONS = "https://cdn.jsdelivr.net/gh/homarr-labs/dashboard-icons"

# Edit this tuple to add or remove a service from the /cloud page.
CLOUD_SERVICES: tuple[CloudService, ...] = (
    CloudService(
        "FoundryVTT",
        "Virtual tabletop for playing tabletop RPGs online",
        "https://foundry.robswebhub.net",
        f"{_ICONS}/png/foundry-vtt.png",
    ),
    CloudService(
        "Vaultwarden",
        "Lightweight, self-hosted password manager compatible with Bitwarden",
        "https://vault.robswebhub.net",
        f"{_ICONS}/svg/vaultwarden.svg",
    ),
    CloudService(
        "Wakapi",
        "Coding activity dashboard that tracks time spent in your editor",
        "https://wakapi.robswebhub.net",
        f"{_ICONS}/svg/wakapi.svg",
    ),
    CloudService(
        "Nextcloud",
        "Personal cloud storage for files, calendars, and contacts",
        "https://storage.robswebhub.net",
        f"{_ICONS}/svg/nextcloud.svg",
    ),
    CloudService(
        "Uptime Kuma",
        "Self-hosted monitoring tool to track service uptime and availability",
        "https://uptime.robswebhub.net",
        f"{_ICONS}/svg/uptime-kuma.svg",
    ),
    CloudService(
        "Audiobookshelf",
        "Self-hosted audiobook and podcast server",
        "https://audiobookshelf.robswebhub.net",
        f"{_ICONS}/svg/audiobookshelf.svg",
    ),
    CloudService(
        "Paperless-ngx",
        "Document management system that turns physical documents into a searchable archive of PDFs",
        "https://paperless.robswebhub.net",
        f"{_ICONS}/svg/paperless-ngx.svg",
    ),
    CloudService(
        "Miniflux",
        "Minimalist and opinionated feed reader",
        "https://miniflux.robswebhub.net",
        f"{_ICONS}/svg/miniflux.svg",
    ),
)
