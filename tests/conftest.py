import pytest
from httpx import ASGITransport, AsyncClient
from starlette.applications import Starlette
from starlette.responses import JSONResponse, PlainTextResponse
from starlette.routing import Route

from asgi_accept_encoding.middleware import AcceptEncodingMiddleware


async def echo_header(request):
    """Echo the parsed header back in canonical form."""
    accept_encoding = request.state.accept_encoding
    if accept_encoding is None:
        return PlainTextResponse("absent")
    return PlainTextResponse(accept_encoding.render())

async def describe_header(request):
    """Expose the parsed entries for assertions."""
    accept_encoding = request.state.accept_encoding
    if accept_encoding is None:
        return JSONResponse(None)
    return JSONResponse(
        {
            "wildcard": accept_encoding.wildcard,
            "entries": [
                [str(p.encoding), p.effective_weight] for p in accept_encoding
            ],
        }
    )

# --- App Fixture ---

def build_app(**middleware_options):
    routes = [
        Route("/echo", echo_header),
        Route("/describe", describe_header),
    ]

    application = Starlette(routes=routes)
    application.add_middleware(AcceptEncodingMiddleware, **middleware_options)
    return application

@pytest.fixture
def app():
    return build_app()

@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver"
    ) as c:
        # httpx sends its own Accept-Encoding by default
        del c.headers["accept-encoding"]
        yield c
