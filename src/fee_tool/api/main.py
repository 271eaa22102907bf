import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ConfigDict

from fee_tool import __version__
from fee_tool.config.settings import get_settings
from fee_tool.engine.input_query import build_input_query
from fee_tool.engine.normalize import normalize_variant_gid
from fee_tool.api.rules_api import router as rules_router
from fee_tool.api.state import engine

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Fee Tool API",
    description="Cart-transform function for tiered checkout fees",
    version=__version__
)

# Enable CORS for the checkout extension
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include rules quoting API
app.include_router(rules_router)


class AttributeInput(BaseModel):
    value: Optional[str] = None


class CartInput(BaseModel):
    model_config = ConfigDict(extra="allow")

    feeRules: Optional[AttributeInput] = None
    feeVariantGid: Optional[AttributeInput] = None
    lines: list[dict] = []


class RunRequest(BaseModel):
    cart: CartInput


@app.get("/")
async def root():
    return {"status": "online", "message": "Fee Tool API Active"}


@app.get("/api/health")
async def health():
    settings = get_settings()
    return {
        "ok": True,
        "config": {
            "version": __version__,
            "rules_attribute": settings.rules_attribute,
            "fee_variant_attribute": settings.fee_variant_attribute,
            "fee_variant_configured": bool(normalize_variant_gid(settings.fee_variant_gid)),
        }
    }


@app.get("/api/fee-variant")
async def get_fee_variant():
    gid = normalize_variant_gid(get_settings().fee_variant_gid)
    return JSONResponse({"gid": gid}, headers={"Cache-Control": "no-store"})


@app.get("/api/input-query", response_class=PlainTextResponse)
async def get_input_query():
    return build_input_query(get_settings())


@app.post("/api/cart-transform/run")
async def cart_transform_run(req: RunRequest):
    try:
        return engine.run_input(req.model_dump())
    except Exception as e:
        logger.exception("Cart transform failed")
        raise HTTPException(status_code=500, detail=str(e))
