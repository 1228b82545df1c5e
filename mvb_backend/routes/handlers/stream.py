"""
Media streaming endpoint with single byte-range support.

Endpoint: GET /api/stream/{file}
- no Range header (or an unparseable one): 200 with the full body
- `Range: bytes=start-end`: 206 with Content-Range and the requested span
- range outside the file: 416 with `Content-Range: bytes */<size>`
- unknown or unsafe filename: 404
"""
from aiohttp import hdrs, web

from mvb_shared import get_logger

from ...features.stream import ByteRange, MediaTarget, RangeNotSatisfiable, parse_range_header
from ...features.stream.service import NOT_FOUND_MESSAGE
from ...observability import is_client_disconnect
from ..core import _require_service

logger = get_logger(__name__)


def _not_found() -> web.Response:
    return web.Response(status=404, text=NOT_FOUND_MESSAGE)


def _range_not_satisfiable(size: int) -> web.Response:
    return web.Response(
        status=416,
        headers={
            hdrs.CONTENT_RANGE: f"bytes */{size}",
            hdrs.ACCEPT_RANGES: "bytes",
        },
    )


def _build_stream_response(target: MediaTarget, byte_range: ByteRange | None) -> web.StreamResponse:
    headers = {
        hdrs.CONTENT_TYPE: target.content_type,
        hdrs.ACCEPT_RANGES: "bytes",
    }
    if byte_range is not None:
        headers[hdrs.CONTENT_RANGE] = byte_range.content_range()
        response = web.StreamResponse(status=206, headers=headers)
        response.content_length = byte_range.length
    else:
        response = web.StreamResponse(status=200, headers=headers)
        response.content_length = target.size
    return response


def register_stream_routes(routes: web.RouteTableDef) -> None:
    @routes.get("/api/stream/{file}")
    async def stream_movie(request: web.Request) -> web.StreamResponse:
        streamer = _require_service(request, "streamer")
        resolved = streamer.resolve(request.match_info.get("file", ""))
        if not resolved.ok:
            return _not_found()
        target = resolved.unwrap()

        try:
            byte_range = parse_range_header(request.headers.get(hdrs.RANGE), target.size)
        except RangeNotSatisfiable as exc:
            logger.debug("Unsatisfiable range %r for %s", request.headers.get(hdrs.RANGE), target.name)
            return _range_not_satisfiable(exc.size)

        opened = await streamer.open_span(target, byte_range)
        if not opened.ok:
            return _not_found()

        response = _build_stream_response(target, byte_range)
        async with opened.unwrap() as reader:
            try:
                await response.prepare(request)
                if request.method != hdrs.METH_HEAD:
                    while True:
                        chunk = await reader.read()
                        if not chunk:
                            break
                        await response.write(chunk)
                await response.write_eof()
            except Exception as exc:
                if not is_client_disconnect(exc):
                    raise
                logger.debug("Client disconnected while streaming %s: %s", target.name, exc)
        return response
