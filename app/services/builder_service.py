# app/services/builder_service.py
import uuid
from decimal import Decimal
from typing import Iterable

from app.schemas.cart import CartItemCreate, IngredientChoice
from app.schemas.catalog import (
    BuilderOptions,
    CustomSandwichCreate,
    IngredientRead,
    PLACEHOLDER_IMAGE,
)

CUSTOM_SANDWICH_NAME = "Sandwich Personnalisé"


class BuilderError(ValueError):
    """Raised when a selection cannot make a sandwich."""


def group_options(ingredients: Iterable[IngredientRead]) -> BuilderOptions:
    """Split catalog ingredients into the four builder steps."""
    groups: dict[str, list[IngredientRead]] = {
        "bread": [],
        "protein": [],
        "veggie": [],
        "sauce": [],
    }
    for ingredient in ingredients:
        groups[ingredient.type].append(ingredient)
    return BuilderOptions(**groups)


def _unique(ids: list[str]) -> list[str]:
    # Toggling an option twice in the UI can send it twice
    return list(dict.fromkeys(ids))


class CustomSandwichBuilder:
    """
    Turns the four wizard steps into a cart item.

    Steps, in order:
      1. bread   - exactly one (required)
      2. protein - exactly one (required)
      3. veggies - at least one
      4. sauces  - optional

    The sandwich costs the sum of the selected options and gets a
    fresh id on every build.
    """

    def __init__(self, options: BuilderOptions):
        self.options = options

    @staticmethod
    def _pick(pool: list[IngredientRead], option_id: str, step: str) -> IngredientRead:
        for option in pool:
            if option.id == option_id:
                return option
        raise BuilderError(f"Unknown {step} option: {option_id}")

    def build(self, selection: CustomSandwichCreate) -> CartItemCreate:
        bread = self._pick(self.options.bread, selection.bread_id, "bread")
        protein = self._pick(self.options.protein, selection.protein_id, "protein")

        veggie_ids = _unique(selection.veggie_ids)
        if not veggie_ids:
            raise BuilderError("Pick at least one veggie")
        veggies = [self._pick(self.options.veggie, v, "veggie") for v in veggie_ids]

        sauces = [
            self._pick(self.options.sauce, s, "sauce") for s in _unique(selection.sauce_ids)
        ]

        chosen = [bread, protein, *veggies, *sauces]
        price = sum((option.price for option in chosen), Decimal("0"))

        sauce_text = ", ".join(s.name for s in sauces) if sauces else "sans sauce"
        description = (
            f"{bread.name} avec {protein.name}, "
            f"{', '.join(v.name for v in veggies)} et {sauce_text}"
        )

        return CartItemCreate(
            id=f"custom-{uuid.uuid4().hex}",
            name=CUSTOM_SANDWICH_NAME,
            description=description,
            price=price,
            image=PLACEHOLDER_IMAGE,
            is_custom=True,
            ingredients=[
                IngredientChoice(
                    id=option.id,
                    name=option.name,
                    price=option.price,
                    type=option.type,
                    image=option.image,
                )
                for option in chosen
            ],
        )
