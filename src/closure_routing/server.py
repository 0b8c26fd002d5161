"""FastAPI surface for the map UI: endpoint selection, closures and route history."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .config import BASEMAPS, Settings, load_settings
from .controller import ClosureInteractionController, SessionState
from .errors import GeocodingError, IndexOutOfRange, UnknownBasemap, VisualHandleError
from .geocoding import NominatimClient
from .models import ClosureSummary, Notice, Place, Point, RouteSummary
from .routing_client import OpenRouteServiceClient, RoutingClient
from .surface import MapSurface


class LonLat(BaseModel):
    lon: float
    lat: float

    def point(self) -> Point:
        return (self.lon, self.lat)


class BasemapChoice(BaseModel):
    name: str


class SessionView(BaseModel):
    state: SessionState
    basemap: str
    origin: Point | None
    destination: Point | None
    routes: list[RouteSummary]
    closures: list[ClosureSummary]
    notices: list[Notice]


def create_app(
    settings: Settings | None = None,
    routing: RoutingClient | None = None,
    geocoder: NominatimClient | None = None,
) -> FastAPI:
    """Build the app around a single interactive session."""
    settings = settings or load_settings()
    routing = routing or OpenRouteServiceClient(settings)
    geocoder = geocoder or NominatimClient(settings)
    surface = MapSurface()
    controller = ClosureInteractionController(
        surface,
        routing,
        margin=settings.closure_buffer_deg,
        animation_interval=settings.animation_interval,
        basemap=settings.default_basemap,
    )
    controller.start()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        controller.close()
        for client in (routing, geocoder):
            aclose = getattr(client, "aclose", None)
            if aclose is not None:
                await aclose()

    app = FastAPI(title="Closure Routing", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.surface = surface
    app.state.controller = controller

    @app.exception_handler(IndexOutOfRange)
    async def _index_out_of_range(request: Request, exc: IndexOutOfRange):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(VisualHandleError)
    async def _visual_handle(request: Request, exc: VisualHandleError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    def session_view() -> SessionView:
        return SessionView(
            state=controller.state,
            basemap=controller.basemap,
            origin=controller.origin,
            destination=controller.destination,
            routes=controller.route_summaries(),
            closures=controller.closure_summaries(),
            notices=controller.notices,
        )

    @app.get("/session", response_model=SessionView)
    async def get_session():
        return session_view()

    @app.put("/session/origin", response_model=SessionView)
    async def set_origin(body: LonLat):
        await controller.set_origin(body.point())
        return session_view()

    @app.put("/session/destination", response_model=SessionView)
    async def set_destination(body: LonLat):
        await controller.set_destination(body.point())
        return session_view()

    @app.post("/session/clicks", response_model=SessionView)
    async def map_click(body: LonLat):
        """Forward a map click to the surface, as the map widget would."""
        await surface.click(body.point())
        return session_view()

    @app.get("/routes", response_model=list[RouteSummary])
    async def list_routes():
        return controller.route_summaries()

    @app.post("/routes/{index}/toggle", response_model=RouteSummary)
    async def toggle_route(index: int):
        controller.toggle_route(index)
        return controller.route_summaries()[index]

    @app.delete("/routes/{index}", status_code=204)
    async def delete_route(index: int):
        controller.delete_route(index)

    @app.get("/closures", response_model=list[ClosureSummary])
    async def list_closures():
        return controller.closure_summaries()

    @app.delete("/closures/{index}", status_code=204)
    async def delete_closure(index: int):
        controller.delete_closure(index)

    @app.get("/basemaps")
    async def list_basemaps():
        return {"active": controller.basemap, "basemaps": BASEMAPS}

    @app.put("/basemap")
    async def select_basemap(body: BasemapChoice):
        try:
            name = controller.select_basemap(body.name)
        except UnknownBasemap as e:
            raise HTTPException(status_code=400, detail=str(e))
        return {"active": name, "url": BASEMAPS[name]}

    @app.get("/layers")
    async def layers():
        """Attached map layers as GeoJSON, plus the current view framing."""
        collection = surface.to_geojson()
        collection["view"] = {
            "bounds": surface.viewport.bounds,
            "padding": surface.viewport.padding,
        }
        return collection

    @app.get("/places", response_model=list[Place])
    async def search_places(q: str = Query("", max_length=200)):
        try:
            return await geocoder.search(q)
        except GeocodingError as e:
            raise HTTPException(status_code=502, detail=str(e))

    return app


app = create_app()
