from __future__ import annotations

import json
import sys
import time
import typing

import click

from ._builder import RequestBuilder
from ._models import Cookie, Method

# ---------------------------------------------------------------------------
# Rich output helpers (graceful fallback when rich is not installed)
# ---------------------------------------------------------------------------

try:
    from rich.console import Console
    from rich.syntax import Syntax
    from rich.text import Text

    HAS_RICH = True
except ImportError:  # pragma: no cover
    HAS_RICH = False


def _status_color(status_code: int) -> str:
    """Return a rich color name based on HTTP status category."""
    if status_code < 200:
        return "cyan"
    elif status_code < 300:
        return "green"
    elif status_code < 400:
        return "yellow"
    elif status_code < 500:
        return "red"
    else:
        return "bold red"


def is_binary_content(content: bytes) -> bool:
    return b"\0" in content


def is_binary_content_type(content_type: str) -> bool:
    text_types = (
        "text/",
        "application/json",
        "application/xml",
        "application/javascript",
        "application/ecmascript",
    )
    ct = content_type.lower().split(";")[0].strip()
    return not any(ct.startswith(t) for t in text_types) and ct != ""


def _body_text(content: bytes, content_type: str) -> str | None:
    """Decoded body for display, or ``None`` for binary payloads."""
    if is_binary_content_type(content_type) or is_binary_content(content):
        return None
    return content.decode("utf-8", errors="replace")


# ---------------------------------------------------------------------------
# Plain-text formatter (used with --no-color or when rich is missing)
# ---------------------------------------------------------------------------


def format_response_plain(builder: RequestBuilder) -> str:
    response = builder.last_response
    http_version = getattr(response, "http_version", "HTTP/1.1")
    reason = getattr(response, "reason_phrase", "")

    status_line = f"{http_version} {builder.resp_status} {reason}".rstrip()
    lines: list[str] = [status_line]

    headers = builder.resp_headers
    for key, value in headers.multi_items():
        lines.append(f"{key}: {value}")

    lines.append("")

    content = builder.raw_resp_body
    if content:
        content_type = headers.get("content-type", "")
        text = _body_text(content, content_type)

        if text is None:
            lines.append(f"<{len(content)} bytes of binary data>")
        elif "application/json" in content_type:
            try:
                data = json.loads(text)
                lines.append(json.dumps(data, indent=4, ensure_ascii=False))
            except (json.JSONDecodeError, TypeError):
                lines.append(text)
        else:
            lines.append(text)

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Rich formatter
# ---------------------------------------------------------------------------


def print_response_rich(console: Console, builder: RequestBuilder) -> None:
    """Pretty-print the builder's last response using rich."""
    response = builder.last_response
    http_version = getattr(response, "http_version", "HTTP/1.1")
    reason = getattr(response, "reason_phrase", "")
    status_code = builder.resp_status
    color = _status_color(status_code)

    status_line = Text()
    status_line.append(f"{http_version} ", style="bold dim")
    status_line.append(f"{status_code}", style=f"bold {color}")
    if reason:
        status_line.append(f" {reason}", style=color)
    console.print(status_line)

    headers = builder.resp_headers
    for key, value in headers.multi_items():
        header_text = Text()
        header_text.append(f"{key}", style="dim cyan")
        header_text.append(": ", style="dim")
        header_text.append(value)
        console.print(header_text)

    console.print()

    content = builder.raw_resp_body
    if content:
        content_type = headers.get("content-type", "")
        text = _body_text(content, content_type)

        if text is None:
            console.print(f"[dim]<{len(content)} bytes of binary data>[/dim]")
        elif "application/json" in content_type:
            try:
                data = json.loads(text)
                formatted = json.dumps(data, indent=4, ensure_ascii=False)
                console.print(Syntax(formatted, "json", theme="monokai"))
            except (json.JSONDecodeError, TypeError):
                console.print(text)
        else:
            console.print(text)


# ---------------------------------------------------------------------------
# Argument parsing helpers (curl-style -H "Key: Value", -b "name=value")
# ---------------------------------------------------------------------------


def parse_header(header: str) -> tuple[str, str]:
    """Parse a 'Key: Value' header string."""
    if ":" not in header:
        raise click.BadParameter(
            f"Invalid header format: '{header}'. Expected 'Key: Value'."
        )
    key, _, value = header.partition(":")
    return key.strip(), value.strip()


def parse_cookie(cookie: str) -> Cookie:
    """Parse a 'name=value' cookie string."""
    if "=" not in cookie:
        raise click.BadParameter(
            f"Invalid cookie format: '{cookie}'. Expected 'name=value'."
        )
    name, _, value = cookie.partition("=")
    return Cookie(name.strip(), value.strip())


# ---------------------------------------------------------------------------
# CLI command
# ---------------------------------------------------------------------------


@click.command(help="Send one HTTP request with a chainable builder.")
@click.argument("url")
@click.option(
    "-m",
    "--method",
    default="GET",
    type=click.Choice([m.value for m in Method], case_sensitive=False),
    help="HTTP method.",
)
@click.option(
    "-c", "--content", default=None, help="Content to send in the request body."
)
@click.option(
    "-j", "--json-data", "json_body", default=None, help="JSON data to send."
)
@click.option(
    "--follow-redirects/--no-follow-redirects",
    default=False,
    help="Follow redirects.",
)
@click.option("--auth", nargs=2, default=None, help="Username and password.", type=str)
@click.option("--proxy", default=None, help="Proxy URL, e.g. http://127.0.0.1:8080.")
@click.option("--download", default=None, help="Download to file.")
@click.option(
    "-H",
    "--header",
    "headers",
    multiple=True,
    help='Add a header, e.g. -H "Authorization: Bearer token".',
)
@click.option(
    "-b",
    "--cookie",
    "cookies",
    multiple=True,
    help='Send a cookie, e.g. -b "session=abc".',
)
@click.option(
    "--timing", is_flag=True, default=False, help="Show request timing."
)
@click.option(
    "--no-color", is_flag=True, default=False, help="Disable colored output."
)
def main(
    url: str,
    method: str,
    content: str | None,
    json_body: str | None,
    follow_redirects: bool,
    auth: tuple[str, str] | None,
    proxy: str | None,
    download: str | None,
    headers: tuple[str, ...],
    cookies: tuple[str, ...],
    timing: bool,
    no_color: bool,
) -> None:
    use_rich = HAS_RICH and not no_color and sys.stdout.isatty()

    parsed_headers = [parse_header(h) for h in headers]
    parsed_cookies = [parse_cookie(c) for c in cookies]

    with RequestBuilder(follow_redirects=follow_redirects) as builder:
        builder.method(method, url)
        if proxy is not None:
            builder.proxy(proxy)
        for key, value in parsed_headers:
            builder.append_header(key, value)
        if parsed_cookies:
            builder.add_cookies(parsed_cookies)
        if auth is not None:
            builder.set_basic_auth(*auth)

        if json_body is not None:
            try:
                data: typing.Any = json.loads(json_body)
            except json.JSONDecodeError as exc:
                raise click.BadParameter(
                    f"Invalid JSON: {exc}", param_hint="'-j' / '--json-data'"
                ) from exc
            builder.set_header("Content-Type", "application/json")
            builder.payload(json.dumps(data).encode("utf-8"))
        elif content is not None:
            builder.payload(content.encode("utf-8"))

        start_time = time.monotonic()
        error = builder.end()
        elapsed_ms = (time.monotonic() - start_time) * 1000

        if error is not None:
            if use_rich:
                console = Console(stderr=True)
                console.print(f"[bold red]{type(error).__name__}[/bold red]: {error}")
            else:
                click.echo(f"{type(error).__name__}: {error}", err=True)
            sys.exit(1)

        if download is not None:
            with open(download, "wb") as f:
                f.write(builder.raw_resp_body)

            if use_rich:
                console = Console()
                size = len(builder.raw_resp_body)
                console.print(
                    f"[green]✓[/green] Downloaded [bold]{size:,}[/bold] bytes "
                    f"to [cyan]{download}[/cyan]"
                )
            return

        if use_rich:
            console = Console()
            print_response_rich(console, builder)
            if timing:
                console.print()
                console.print(f"[dim]⏱  Total: {elapsed_ms:.1f}ms[/dim]")
        else:
            click.echo(format_response_plain(builder))
            if timing:
                click.echo()
                click.echo(f"Total: {elapsed_ms:.1f}ms")

        if builder.resp_status >= 300:
            sys.exit(1)
