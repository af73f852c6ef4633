"""
Products API Router

Public catalog endpoint proxied from Printify.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from core.errors import CatalogError
from core.logging import get_logger
from core.routers.deps import get_catalog
from core.services.catalog import CatalogService

logger = get_logger(__name__)

router = APIRouter(tags=["products"])


@router.get("/api/products")
async def get_products(catalog: CatalogService = Depends(get_catalog)):
    """Get all shop products (public)"""
    try:
        products = await catalog.list_products()
    except CatalogError as e:
        return JSONResponse(status_code=e.status_code, content={"error": e.detail})
    except Exception as e:
        logger.error(f"Printify API error: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": str(e)})

    return {"products": [p.model_dump() for p in products]}
