# app/services/catalog_service.py
from fastapi import HTTPException, status

from app.core.storage_utils import (
    upload_to_storage,
    delete_public_url,
    generate_filename,
)
from app.repositories.catalog_repo import IngredientRepository, SandwichRepository
from app.schemas.catalog import (
    IngredientCreate,
    IngredientRead,
    IngredientUpdate,
    SandwichCreate,
    SandwichRead,
    SandwichUpdate,
)


# --- Image config ---

MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5MB per image

ALLOWED_IMAGE_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


class CatalogService:
    """
    Business logic for sandwiches & ingredients.

    Responsibilities:
      - storefront listing (search / type filter on ingredients)
      - 404 handling for admin edits
      - image upload/replace orchestration with Supabase Storage
      - admin-only writes (enforced at router via require_admin)
    """

    def __init__(self, sandwiches: SandwichRepository, ingredients: IngredientRepository):
        self.sandwiches = sandwiches
        self.ingredients = ingredients

    # ----- Helpers -----

    @staticmethod
    def _validate_and_get_ext(content_type: str, file_bytes: bytes) -> str:
        if content_type not in ALLOWED_IMAGE_CONTENT_TYPES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Unsupported image type. Allowed: JPEG, PNG, WEBP.",
            )

        if len(file_bytes) > MAX_IMAGE_BYTES:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail="Image too large (max 5MB).",
            )

        return ALLOWED_IMAGE_CONTENT_TYPES[content_type]

    def _upload_image(
        self,
        folder: str,
        name: str,
        content_type: str,
        file_bytes: bytes,
    ) -> str:
        """
        Upload a picture under a fresh filename.

        Path pattern:
            <folder>/<slugified-name>-<uuid>.<ext>
        """
        ext = self._validate_and_get_ext(content_type, file_bytes)
        path = f"{folder}/{generate_filename(name, ext)}"
        return upload_to_storage(path, file_bytes, content_type)

    # ----- Sandwiches -----

    def list_sandwiches(self) -> list[SandwichRead]:
        return self.sandwiches.list()

    def get_sandwich(self, sandwich_id: str) -> SandwichRead:
        sandwich = self.sandwiches.get_by_id(sandwich_id)
        if not sandwich:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Sandwich not found",
            )
        return sandwich

    def create_sandwich(self, payload: SandwichCreate) -> SandwichRead:
        return self.sandwiches.create(payload.model_dump(mode="json"))

    def update_sandwich(self, sandwich_id: str, payload: SandwichUpdate) -> SandwichRead:
        values = payload.model_dump(mode="json", exclude_unset=True)
        if not values:
            return self.get_sandwich(sandwich_id)

        sandwich = self.sandwiches.update(sandwich_id, values)
        if not sandwich:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Sandwich not found",
            )
        return sandwich

    def delete_sandwich(self, sandwich_id: str) -> None:
        sandwich = self.get_sandwich(sandwich_id)
        self.sandwiches.delete(sandwich_id)
        if sandwich.image:
            delete_public_url(sandwich.image)

    def set_sandwich_image(
        self,
        sandwich_id: str,
        content_type: str,
        file_bytes: bytes,
    ) -> SandwichRead:
        """
        Upload a new picture and point the sandwich at it.
        The previous picture is removed from the bucket.
        """
        sandwich = self.get_sandwich(sandwich_id)
        url = self._upload_image("sandwiches", sandwich.name, content_type, file_bytes)
        updated = self.sandwiches.update(sandwich_id, {"image": url})
        if sandwich.image:
            delete_public_url(sandwich.image)
        return updated or sandwich.model_copy(update={"image": url})

    # ----- Ingredients -----

    def list_ingredients(
        self,
        ingredient_type: str | None = None,
        search: str | None = None,
    ) -> list[IngredientRead]:
        """
        Ingredients ordered by type then name.

        `search` is a case-insensitive substring match on the name.
        """
        items = self.ingredients.list(ingredient_type)
        if search:
            needle = search.strip().lower()
            items = [it for it in items if needle in it.name.lower()]
        return items

    def get_ingredient(self, ingredient_id: str) -> IngredientRead:
        ingredient = self.ingredients.get_by_id(ingredient_id)
        if not ingredient:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Ingredient not found",
            )
        return ingredient

    def create_ingredient(self, payload: IngredientCreate) -> IngredientRead:
        return self.ingredients.create(payload.model_dump(mode="json"))

    def update_ingredient(
        self,
        ingredient_id: str,
        payload: IngredientUpdate,
    ) -> IngredientRead:
        values = payload.model_dump(mode="json", exclude_unset=True)
        if not values:
            return self.get_ingredient(ingredient_id)

        ingredient = self.ingredients.update(ingredient_id, values)
        if not ingredient:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Ingredient not found",
            )
        return ingredient

    def delete_ingredient(self, ingredient_id: str) -> None:
        ingredient = self.get_ingredient(ingredient_id)
        self.ingredients.delete(ingredient_id)
        if ingredient.image:
            delete_public_url(ingredient.image)

    def set_ingredient_image(
        self,
        ingredient_id: str,
        content_type: str,
        file_bytes: bytes,
    ) -> IngredientRead:
        ingredient = self.get_ingredient(ingredient_id)
        url = self._upload_image("ingredients", ingredient.name, content_type, file_bytes)
        updated = self.ingredients.update(ingredient_id, {"image": url})
        if ingredient.image:
            delete_public_url(ingredient.image)
        return updated or ingredient.model_copy(update={"image": url})
