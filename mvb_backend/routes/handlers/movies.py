"""
Movie listing endpoint.

Endpoint: GET /api/movies
Returns a JSON array of `{file, title, overview, poster, year, duration}` in
directory scan order. A directory scan failure answers 500 with `{ok: false, ...}`.
"""
from aiohttp import web

from mvb_shared import get_logger

from ..core import _json_error_response, _json_payload_response, _require_service

logger = get_logger(__name__)


def register_movie_routes(routes: web.RouteTableDef) -> None:
    @routes.get("/api/movies")
    async def list_movies(request: web.Request) -> web.Response:
        library = _require_service(request, "library")
        result = await library.list_movies()
        if not result.ok:
            logger.error("Movie listing failed: %s", result.error)
            return _json_error_response(result, status=500)
        return _json_payload_response([record.to_dict() for record in result.data or []])
