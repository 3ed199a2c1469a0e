"""
FastAPI development backend for the Recipe Manager.

This module serves the recipes API contract the Streamlit screen depends on, backed
by the in-memory RecipeStore:
- GET /api/recipes: List recipes
- POST /api/recipes: Create a recipe
- PATCH /api/recipes/{id}: Update a recipe
- DELETE /api/recipes/{id}: Delete a recipe
- GET /api/inventory: List the inventory catalog
- GET /api/recipes/{id}/items: List a recipe's ingredients with inventory details
- POST /api/recipes/{id}/items: Add an ingredient to a recipe
- DELETE /api/recipes/{id}/items/{item_id}: Remove an ingredient from a recipe
- GET /health: Health check

Run the API with:
    uvicorn api.main:app --reload

Access API documentation at:
    http://localhost:8000/docs (Swagger UI)
"""

# Import config early to load .env file before any other code accesses environment variables
import api.config  # noqa: F401

import logging
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request, Response, status

from api.config import DevServerConfig
from api.schemas import RecipeCreate, RecipeItemCreate, RecipeUpdate
from api.store import NotFoundError, RecipeStore, seed_demo_data
from kitchen.models import InventoryItem, Recipe, RecipeItem, RecipeItemWithDetails

logger = logging.getLogger(__name__)


def get_store(request: Request) -> RecipeStore:
    """Dependency returning the app's store."""
    return request.app.state.store


def _not_found(exc: NotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


def create_app(store: Optional[RecipeStore] = None, seed: Optional[bool] = None) -> FastAPI:
    """
    Build the development API.

    Args:
        store: Store to serve; a new empty RecipeStore when None
        seed: Seed demo data into a new store (default: SEED_DEMO_DATA)
    """
    app = FastAPI(
        title="Recipe Manager API (development)",
        description="In-memory recipes, inventory and recipe items for local development",
        version="1.0.0",
        tags_metadata=[
            {"name": "recipes", "description": "Create, list and update recipes."},
            {"name": "recipe-items", "description": "Ingredients attached to a recipe."},
            {"name": "inventory", "description": "Inventory catalog (read-only)."},
            {"name": "health", "description": "Health check."},
        ],
    )

    if store is None:
        store = RecipeStore()
        if DevServerConfig.seed_demo_data() if seed is None else seed:
            seed_demo_data(store)
    app.state.store = store

    @app.get("/health", tags=["health"])
    def health():
        return {"status": "ok"}

    @app.get("/api/recipes", response_model=List[Recipe], tags=["recipes"])
    def list_recipes(store: RecipeStore = Depends(get_store)):
        return store.list_recipes()

    @app.post("/api/recipes", response_model=Recipe, status_code=status.HTTP_201_CREATED, tags=["recipes"])
    def create_recipe(body: RecipeCreate, store: RecipeStore = Depends(get_store)):
        recipe = store.create_recipe(body)
        logger.info("Created recipe %d (%s)", recipe.id, recipe.dish_name)
        return recipe

    @app.patch("/api/recipes/{recipe_id}", response_model=Recipe, tags=["recipes"])
    def update_recipe(recipe_id: int, body: RecipeUpdate, store: RecipeStore = Depends(get_store)):
        try:
            return store.update_recipe(recipe_id, body)
        except NotFoundError as e:
            raise _not_found(e)

    @app.delete("/api/recipes/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["recipes"])
    def delete_recipe(recipe_id: int, store: RecipeStore = Depends(get_store)):
        try:
            store.delete_recipe(recipe_id)
        except NotFoundError as e:
            raise _not_found(e)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/api/inventory", response_model=List[InventoryItem], tags=["inventory"])
    def list_inventory(store: RecipeStore = Depends(get_store)):
        return store.list_inventory()

    @app.get("/api/recipes/{recipe_id}/items", response_model=List[RecipeItemWithDetails], tags=["recipe-items"])
    def list_recipe_items(recipe_id: int, store: RecipeStore = Depends(get_store)):
        try:
            return store.list_recipe_items(recipe_id)
        except NotFoundError as e:
            raise _not_found(e)

    @app.post(
        "/api/recipes/{recipe_id}/items",
        response_model=RecipeItem,
        status_code=status.HTTP_201_CREATED,
        tags=["recipe-items"],
    )
    def add_recipe_item(recipe_id: int, body: RecipeItemCreate, store: RecipeStore = Depends(get_store)):
        try:
            return store.add_recipe_item(recipe_id, body)
        except NotFoundError as e:
            raise _not_found(e)

    @app.delete(
        "/api/recipes/{recipe_id}/items/{item_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        tags=["recipe-items"],
    )
    def remove_recipe_item(recipe_id: int, item_id: int, store: RecipeStore = Depends(get_store)):
        try:
            store.remove_recipe_item(recipe_id, item_id)
        except NotFoundError as e:
            raise _not_found(e)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return app


app = create_app()
