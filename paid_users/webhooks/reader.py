"""Raw request body reader.

Signature verification is computed over the exact bytes Stripe sent, so the
body is read from the ASGI stream rather than from any parsed representation.
"""

from fastapi import Request


async def read_raw_body(request: Request) -> bytes:
    """Consume the request stream in arrival order and return it as one buffer.

    A client disconnect mid-read raises starlette's ClientDisconnect; nothing
    downstream has run at that point.
    """
    chunks: list[bytes] = []
    async for chunk in request.stream():
        if chunk:
            chunks.append(chunk)
    return b"".join(chunks)
