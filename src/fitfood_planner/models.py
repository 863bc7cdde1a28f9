"""Data models for FitFoodWay products and daily menu totals."""

from pydantic import BaseModel, ConfigDict


class Macro(BaseModel):
    """Nutritional breakdown of one serving, in the order the site lists it."""

    model_config = ConfigDict(frozen=True)

    grams: float
    kcal: float
    carbohydrates: float
    fats: float
    proteins: float
    fibers: float

    @classmethod
    def zero(cls) -> "Macro":
        """Return a macro with every field set to zero."""
        return cls(grams=0, kcal=0, carbohydrates=0, fats=0, proteins=0, fibers=0)

    def __add__(self, other: "Macro") -> "Macro":
        """Sum two macros field by field."""
        return Macro(
            **{name: getattr(self, name) + getattr(other, name) for name in Macro.model_fields}
        )


class Product(BaseModel):
    """A FitFoodWay product with its discounted price and macros."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    price: float
    macro: Macro


class DayTotal(BaseModel):
    """Summed price and macros for one day of a menu."""

    day: str
    menu: list[str] = []
    price: float = 0.0
    macro: Macro = Macro.zero()


class AdditionalFood(BaseModel):
    """A food eaten on top of the menu to reach a daily calorie target."""

    model_config = ConfigDict(frozen=True)

    name: str
    grams: float
    kcal: float
    proteins: float

    def scale(self, factor: float) -> "AdditionalFood":
        """Return the food scaled by ``factor``, rounded to whole units."""
        return AdditionalFood(
            name=self.name,
            grams=round(factor * self.grams),
            kcal=round(factor * self.kcal),
            proteins=round(factor * self.proteins),
        )


class TopUp(BaseModel):
    """Extra food suggested for a day and the day's totals including it."""

    day: str
    target_kcal: float
    foods: list[AdditionalFood] = []
    kcal: float
    proteins: float
