"""FastAPI application exposing the order parser."""

from __future__ import annotations

from typing import List, Optional, Union

from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel

from ..config import Settings
from ..core.parser import customers_from_records
from ..core.pipeline import OrderService


class CustomerPayload(BaseModel):
    id: Union[int, str]
    name: str
    phone: Optional[str] = None
    address: Optional[str] = None


class ParseRequest(BaseModel):
    text: str
    customers: Optional[List[CustomerPayload]] = None


def create_app(settings: Settings, service: Optional[OrderService] = None) -> FastAPI:
    app = FastAPI(title="Order Text Parser")
    order_service = service or OrderService(settings)

    def get_service() -> OrderService:
        return order_service

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok", "products": len(order_service.products)}

    @app.post("/parse")
    async def parse(request: ParseRequest, pipeline: OrderService = Depends(get_service)) -> dict:
        if not request.text.strip():
            raise HTTPException(status_code=400, detail="Empty order text")
        customers = None
        if request.customers is not None:
            customers = customers_from_records(customer.dict() for customer in request.customers)
        return pipeline.parse(request.text, customers).to_dict()

    @app.get("/products")
    async def list_products(pipeline: OrderService = Depends(get_service)) -> List[dict]:
        return [product.to_dict() for product in pipeline.products]

    @app.get("/products/search")
    async def search_products(
        q: str = Query(..., description="Free-text query"),
        limit: Optional[int] = Query(None, ge=1),
        pipeline: OrderService = Depends(get_service),
    ) -> List[dict]:
        return [
            {**result.product.to_dict(), "score": round(result.confidence, 4)}
            for result in pipeline.search(q, limit=limit)
        ]

    @app.get("/products/categories")
    async def list_categories(pipeline: OrderService = Depends(get_service)) -> dict:
        return {
            category: [product.to_dict() for product in products]
            for category, products in pipeline.categories().items()
        }

    @app.get("/products/{product_id}")
    async def get_product(product_id: str, pipeline: OrderService = Depends(get_service)) -> dict:
        product = pipeline.product(product_id)
        if product is None:
            raise HTTPException(status_code=404, detail="Product not found")
        return product.to_dict()

    @app.post("/catalog/reload")
    async def reload_catalog(pipeline: OrderService = Depends(get_service)) -> dict:
        count = pipeline.reload_catalog()
        return {"status": "reloaded", "products": count}

    return app


__all__ = ["create_app"]
