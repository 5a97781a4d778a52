"""DHCP Route Converter API."""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException

from config_loader import ConfigError, loads_routing_config
from converter import NO_DEFAULT_ROUTE_WARNING, generate_dhcp_options, render_config
from models import (
    ConfigRenderRequest,
    ConfigRenderResponse,
    DecodeRequest,
    DecodeResponse,
    EncodeRequest,
    EncodeResponse,
    PoolRecord,
)
from prioritizer import merge_routes
from renderers import OutputFormat, UnknownFormatError
from route_codec import decode_payload

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

VERSION = "3.0.0"

app = FastAPI(title="DHCP Route Converter", description="RFC 3442 option 121/249 encoder", version=VERSION)


@app.post("/api/encode", response_model=EncodeResponse)
async def encode(request: EncodeRequest):
    routes = merge_routes(
        default_gateway=request.default_gateway,
        scoped_routes=[(r.network, r.gateway) for r in request.routes],
        scope=request.pool_name or "",
    )
    try:
        result = generate_dhcp_options(
            routes.networks, routes.gateways, request.format, request.with_option_249, request.pool_name,
        )
    except UnknownFormatError as e:
        raise HTTPException(400, str(e))
    return EncodeResponse(
        payload=result.payload,
        saw_default_route=result.saw_default_route,
        lines=result.lines,
        skipped=result.skipped,
    )


@app.post("/api/decode", response_model=DecodeResponse)
async def decode(request: DecodeRequest):
    result = decode_payload(request.payload)
    if result.error and not result.routes:
        raise HTTPException(422, result.error)
    return DecodeResponse(routes=result.lines(), saw_default_route=result.saw_default_route)


@app.post("/api/config/render", response_model=ConfigRenderResponse)
async def render_routers(request: ConfigRenderRequest):
    try:
        config = loads_routing_config(request.config)
        outputs = render_config(config, request.format, request.with_option_249)
    except (ConfigError, UnknownFormatError) as e:
        raise HTTPException(400, str(e))

    response = ConfigRenderResponse()
    for output in outputs:
        response.pools.append(PoolRecord(
            router=output.plan.router,
            pool=output.plan.pool,
            payload=output.result.payload,
            saw_default_route=output.result.saw_default_route,
            lines=output.result.lines,
        ))
        if not output.result.saw_default_route:
            response.warnings.append(f"{output.plan.pool}: {NO_DEFAULT_ROUTE_WARNING}")
    return response


@app.get("/api/formats")
async def list_formats():
    return {"formats": [f.value for f in OutputFormat]}


@app.get("/api/health")
async def health():
    return {"status": "ok", "version": VERSION}
