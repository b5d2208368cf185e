from __future__ import annotations

import logging
from pathlib import Path

import httpx

from daykit_core.config import Config
from daykit_core.errors import ConfigError, IoError, TransportError
from daykit_core.writes import write_new

logger = logging.getLogger(__name__)

BASE_URL = "https://adventofcode.com"
DEFAULT_INPUT_TIMEOUT_SECONDS = 5.0


def url_for_day(year: int, day: int) -> str:
    return f"{BASE_URL}/{year}/day/{day}"


def get_input(config: Config, year: int, day: int, *, client: httpx.Client | None = None) -> Path:
    """Download the puzzle input for ``year``/``day`` unless it is already cached.

    Returns the path of the input file.
    """

    input_path = config.input_for(year, day)
    if input_path.exists():
        logger.debug("Input already present at %s", input_path)
        return input_path

    if not config.session:
        raise ConfigError("No session key configured. Set one with `daykit config set --session <key>`.")

    url = f"{url_for_day(year, day)}/input"
    try:
        if client is not None:
            data = _download(client, url, config.session)
        else:
            with httpx.Client(timeout=DEFAULT_INPUT_TIMEOUT_SECONDS, follow_redirects=True) as own_client:
                data = _download(own_client, url, config.session)
    except httpx.HTTPError as e:
        raise TransportError(f"Failed to download input from {url}: {e}") from e

    try:
        input_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IoError(f"creating input directory {input_path.parent}", e) from e
    write_new(input_path, data, if_exists="error")
    logger.info("Saved input for %d day %d to %s", year, day, input_path)
    return input_path


def _download(client: httpx.Client, url: str, session: str) -> bytes:
    resp = client.get(url, headers={"Cookie": f"session={session}"})
    resp.raise_for_status()
    return resp.content
