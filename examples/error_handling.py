"""
Error Handling
==============

Demonstrates the sticky error and the exception hierarchy.

Exception hierarchy:
    HTTPChainError
    ├── ConfigurationError     (no method / url, malformed proxy)
    ├── TransportError         (connect, timeout, TLS, redirects)
    └── BodyReadError          (body stream failed mid-read)
"""

import httpchain


def main() -> None:
    builder = httpchain.RequestBuilder()

    # ── Returned errors ──────────────────────────────────────────────────
    print("── Returned errors ────────────────────────────────────────────")
    error = builder.get("http://127.0.0.1:1/").end()
    print(f"  {type(error).__name__}: {error}")
    print()

    # ── Sticky errors in a chain ─────────────────────────────────────────
    print("── Sticky errors ──────────────────────────────────────────────")
    builder.get("https://httpbin.org/get").proxy("http://bad\nproxy").end()
    print(f"  After the chain: {builder.error!r}")
    print(f"  end() again returns the same error: {builder.end() is builder.error}")
    print()

    # ── raise_for_error() ────────────────────────────────────────────────
    print("── raise_for_error() ──────────────────────────────────────────")
    try:
        builder.raise_for_error()
    except httpchain.ConfigurationError as exc:
        print(f"  Caught ConfigurationError → {exc}")
    print()

    # ── Recovering ───────────────────────────────────────────────────────
    print("── Recovering ─────────────────────────────────────────────────")
    builder.get("https://httpbin.org/status/204")
    print(f"  error after get(): {builder.error}")
    builder.end()
    print(f"  status: {builder.resp_status}")

    builder.close()


if __name__ == "__main__":
    main()
