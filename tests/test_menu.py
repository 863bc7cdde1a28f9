"""Tests for menu aggregation."""

import math

import pytest

from fitfood_planner.menu import (
    aggregate_day,
    aggregate_menu,
    compare_to_target,
    format_day_total,
    format_top_up,
    suggest_additional_food,
)
from fitfood_planner.models import AdditionalFood, DayTotal, Macro


def test_aggregate_day_sums_products(catalog) -> None:  # type: ignore[no-untyped-def]
    total = aggregate_day(catalog, "Monday", [10, 20])

    assert total.day == "Monday"
    assert total.menu == ["A", "B"]
    assert f"{total.price:.2f}" == "30.00"
    assert total.macro == Macro(
        grams=3, kcal=6, carbohydrates=9, fats=12, proteins=15, fibers=18
    )


def test_aggregate_day_accepts_string_ids(catalog) -> None:  # type: ignore[no-untyped-def]
    total = aggregate_day(catalog, "Monday", ["20", "20"])

    assert total.menu == ["B", "B"]
    assert total.price == 40


def test_aggregate_day_empty(catalog) -> None:  # type: ignore[no-untyped-def]
    total = aggregate_day(catalog, "Friday", [])

    assert total.menu == []
    assert total.price == 0
    assert total.macro == Macro.zero()


def test_aggregate_menu_keeps_day_order(catalog) -> None:  # type: ignore[no-untyped-def]
    menu = {"Wednesday": [20], "Monday": [10, 20], "Tuesday": [10]}

    days = [total.day for total in aggregate_menu(catalog, menu)]

    assert days == ["Wednesday", "Monday", "Tuesday"]


def test_aggregate_menu_is_repeatable(catalog) -> None:  # type: ignore[no-untyped-def]
    menu = {"Monday": [10, 20], "Tuesday": [20]}

    first = list(aggregate_menu(catalog, menu))
    second = list(aggregate_menu(catalog, menu))

    assert first == second


def test_aggregate_menu_missing_product_fails(catalog) -> None:  # type: ignore[no-untyped-def]
    menu = {"Monday": [10], "Tuesday": [10, 99], "Wednesday": [20]}
    totals = aggregate_menu(catalog, menu)

    assert next(totals).day == "Monday"
    with pytest.raises(KeyError, match="99"):
        next(totals)


def test_format_day_total() -> None:
    total = DayTotal(
        day="Monday",
        menu=["A", "B"],
        price=30,
        macro=Macro(grams=3, kcal=6, carbohydrates=9, fats=12, proteins=15, fibers=18),
    )

    assert format_day_total(total) == (
        "On Monday the menu is: A, B - 30.00 Lei: "
        '{"grams":3.0,"kcal":6.0,"carbohydrates":9.0,"fats":12.0,'
        '"proteins":15.0,"fibers":18.0}.'
    )


def test_compare_to_target(catalog) -> None:  # type: ignore[no-untyped-def]
    total = aggregate_day(catalog, "Monday", [10, 20])

    assert compare_to_target(total, daily_kcal=10, daily_proteins=12) == [
        "kcal: 10(-4) = 6",
        "proteins: 12(+3) = 15",
    ]


def test_compare_to_target_without_targets(catalog) -> None:  # type: ignore[no-untyped-def]
    total = aggregate_day(catalog, "Monday", [10])

    assert compare_to_target(total) == []
    assert compare_to_target(total, daily_proteins=5) == ["proteins: 5(+0) = 5"]


def test_macro_add_and_zero() -> None:
    macro = Macro(grams=1, kcal=2, carbohydrates=3, fats=4, proteins=5, fibers=6)

    assert macro + Macro.zero() == macro
    assert (macro + macro).fibers == 12


def test_format_day_total_missing_macros_are_null() -> None:
    total = DayTotal(
        day="Monday",
        menu=["A"],
        price=10,
        macro=Macro(grams=1, kcal=2, carbohydrates=3, fats=4, proteins=5, fibers=math.nan),
    )

    assert format_day_total(total).endswith('"proteins":5.0,"fibers":null}.')


FOODS = [
    AdditionalFood(name="Chicken", grams=100, kcal=100, proteins=10),
    AdditionalFood(name="Whey", grams=100, kcal=200, proteins=50),
]


def test_suggest_additional_food_splits_shortfall_equally(catalog) -> None:  # type: ignore[no-untyped-def]
    total = aggregate_day(catalog, "Monday", [10, 20])

    top_up = suggest_additional_food(total, 406, FOODS)

    assert top_up.foods == [
        AdditionalFood(name="Chicken", grams=200, kcal=200, proteins=20),
        AdditionalFood(name="Whey", grams=100, kcal=200, proteins=50),
    ]
    assert top_up.kcal == 406
    assert top_up.proteins == 85


def test_suggest_additional_food_uses_weights(catalog) -> None:  # type: ignore[no-untyped-def]
    total = aggregate_day(catalog, "Monday", [10, 20])

    top_up = suggest_additional_food(total, 406, FOODS, weights=[0.75, 0.25])

    assert [(food.grams, food.kcal, food.proteins) for food in top_up.foods] == [
        (300, 300, 30),
        (50, 100, 25),
    ]
    assert top_up.kcal == 406
    assert top_up.proteins == 70


def test_suggest_additional_food_not_needed(catalog) -> None:  # type: ignore[no-untyped-def]
    total = aggregate_day(catalog, "Monday", [10, 20])

    for target in (6, 5):
        top_up = suggest_additional_food(total, target, FOODS)

        assert top_up.foods == []
        assert top_up.kcal == 6
        assert top_up.proteins == 15
        assert format_top_up(top_up) == ["no additional food needed"]


def test_suggest_additional_food_rejects_mismatched_weights(catalog) -> None:  # type: ignore[no-untyped-def]
    total = aggregate_day(catalog, "Monday", [10])

    with pytest.raises(ValueError):
        suggest_additional_food(total, 500, FOODS, weights=[1.0])


def test_format_top_up(catalog) -> None:  # type: ignore[no-untyped-def]
    total = aggregate_day(catalog, "Monday", [10, 20])

    lines = format_top_up(suggest_additional_food(total, 406, FOODS))

    assert lines == [
        "add Chicken: 200 g, 200 kcal, 20 g proteins",
        "add Whey: 100 g, 200 kcal, 50 g proteins",
        "with additional food: kcal: 406(+0) = 406, proteins: 85",
    ]
