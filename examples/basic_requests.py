"""
Basic Requests
==============

Demonstrates the method-selection calls: get, post, put, patch, delete.
One builder issues every request, so its session cookie jar is shared.
"""

import httpchain


def main() -> None:
    with httpchain.RequestBuilder() as builder:
        # ── GET ──────────────────────────────────────────────────────────
        builder.get("https://httpbin.org/get").end()
        print(f"GET  → {builder.resp_status}")
        print(f"  Length:       {builder.resp_length}")
        print(f"  Content-Type: {builder.resp_headers.get('content-type')}")
        print()

        # ── POST with raw bytes ──────────────────────────────────────────
        builder.post("https://httpbin.org/post")
        builder.set_header("Content-Type", "application/json")
        builder.payload(b'{"hello": "world"}')
        builder.end()
        print(f"POST → {builder.resp_status}")
        print(f"  Body echoed: {builder.raw_resp_body[:60]!r}...")
        print()

        # ── PUT ──────────────────────────────────────────────────────────
        builder.put("https://httpbin.org/put").payload(b"updated payload").end()
        print(f"PUT  → {builder.resp_status}")
        print()

        # ── PATCH ────────────────────────────────────────────────────────
        builder.patch("https://httpbin.org/patch").payload(b"partial update").end()
        print(f"PATCH → {builder.resp_status}")
        print()

        # ── DELETE ───────────────────────────────────────────────────────
        builder.delete("https://httpbin.org/delete").end()
        print(f"DELETE → {builder.resp_status}")


if __name__ == "__main__":
    main()
