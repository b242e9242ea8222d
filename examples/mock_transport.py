"""
Testing with MockTransport
==========================

Demonstrates driving a builder against an in-process handler: useful for
unit tests without hitting the network.
"""

import httpx

import httpchain


def handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/login":
        return httpx.Response(200, headers={"Set-Cookie": "session=abc; Path=/"})
    return httpx.Response(
        200,
        json={
            "method": request.method,
            "cookie": request.headers.get("cookie"),
            "body": request.content.decode(),
        },
    )


def main() -> None:
    with httpchain.RequestBuilder(transport=httpx.MockTransport(handler)) as builder:
        # ── Session cookies ──────────────────────────────────────────────
        print("── Session cookies ─────────────────────────────────────────")
        builder.get("http://example.org/login").end()
        print(f"  Jar: {[c.name for c in builder.cookie_jar]}")
        print()

        # ── Per-request cookies and payload ──────────────────────────────
        print("── Echo ────────────────────────────────────────────────────")
        builder.post("http://example.org/echo")
        builder.add_cookies([("theme", "dark")])
        builder.payload(b"hello")
        builder.end()
        print(f"  Status: {builder.resp_status}")
        print(f"  Body:   {builder.raw_resp_body.decode()}")
        print()

        # ── do() with a ready-made request ───────────────────────────────
        print("── do() ────────────────────────────────────────────────────")
        response, content, error = builder.do(
            httpx.Request("DELETE", "http://example.org/items/1")
        )
        print(f"  Status: {response.status_code}  error: {error}")
        print(f"  Body:   {content!r}")
        print(f"  Builder still holds: {builder.last_request.method}")


if __name__ == "__main__":
    main()
