from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path

import httpx

from daykit_core.errors import DaykitError, IoError, TemplateError, TransportError
from daykit_core.writes import ensure_file, write_new

logger = logging.getLogger(__name__)

TEMPLATE_FILES: tuple[str, ...] = ("Cargo.toml", "src/lib.rs", "src/main.rs")
DEFAULT_TEMPLATE_BASE_URL = "https://raw.githubusercontent.com/coriolinus/aoctool/master/day-template"
DEFAULT_FETCH_TIMEOUT_SECONDS = 5.0

Fetch = Callable[[str], bytes]

# `\{` / `\}` are literal braces; any other `{...}` span is a placeholder and
# must name a context key once surrounding whitespace is trimmed.
_PLACEHOLDER_RE = re.compile(r"\\([{}])|\{([^{}]*)\}")


class TemplateFetcher:
    """Download template files from ``<base_url>/<name>``.

    One attempt per file with a short timeout; failures surface as
    :class:`TransportError`.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_TEMPLATE_BASE_URL,
        *,
        client: httpx.Client | None = None,
        timeout: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client
        self._timeout = timeout

    def url_for(self, name: str) -> str:
        return f"{self.base_url}/{name}"

    def __call__(self, name: str) -> bytes:
        url = self.url_for(name)
        try:
            if self._client is not None:
                return self._get(self._client, url)
            with httpx.Client(timeout=self._timeout, follow_redirects=True) as client:
                return self._get(client, url)
        except httpx.HTTPError as e:
            raise TransportError(f"Failed to download template {name} from {url}: {e}") from e

    @staticmethod
    def _get(client: httpx.Client, url: str) -> bytes:
        resp = client.get(url)
        resp.raise_for_status()
        return resp.content


def ensure_templates(template_dir: Path, template_names: Iterable[str], fetch: Fetch) -> Path:
    """Make sure every template exists locally, downloading only the missing ones.

    Local templates are never overwritten: they may be user customizations.
    """

    for name in template_names:
        template_path = template_dir / name
        if ensure_file(template_path, lambda name=name: fetch(name)):
            logger.info("Fetched template %s into %s", name, template_dir)
    return template_dir


def render_text(template_text: str, context: Mapping[str, int | str], *, name: str = "<template>") -> str:
    missing: set[str] = set()

    def _replace(match: re.Match[str]) -> str:
        literal = match.group(1)
        if literal is not None:
            return literal

        key = match.group(2).strip()
        if key not in context:
            missing.add(key)
            return match.group(0)

        value = context[key]
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise TemplateError(
                f"Template variable {key!r} in {name} must be an int or str, got {type(value).__name__}."
            )
        return str(value)

    rendered = _PLACEHOLDER_RE.sub(_replace, template_text)
    if missing:
        missing_list = ", ".join(repr(key) for key in sorted(missing))
        raise TemplateError(f"Unknown placeholders in {name}: {missing_list}.")
    return rendered


def render(
    template_dir: Path,
    dest_dir: Path,
    template_names: Iterable[str],
    context: Mapping[str, int | str],
) -> list[Path]:
    """Render each template into ``dest_dir``, refusing to replace existing files.

    Files written before a failure are left in place; the raised error lists
    them in ``details["written"]``.
    """

    written: list[Path] = []
    for name in template_names:
        try:
            written.append(_render_one(template_dir, dest_dir, name, context))
        except DaykitError as e:
            e.details.setdefault("written", [str(p) for p in written])
            raise
    return written


def _render_one(template_dir: Path, dest_dir: Path, name: str, context: Mapping[str, int | str]) -> Path:
    template_path = template_dir / name
    try:
        template_text = template_path.read_text(encoding="utf-8")
    except OSError as e:
        raise IoError(f"reading template file {template_path}", e) from e

    rendered = render_text(template_text, context, name=name)

    dest_path = dest_dir / name
    try:
        dest_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IoError(f"creating directory {dest_path.parent}", e) from e
    write_new(dest_path, rendered.encode("utf-8"), if_exists="error")
    logger.info("Rendered %s", dest_path)
    return dest_path
