# ==============================================================================
#  Copyright 2025 Matthew Pounsett <matt@conundrum.com>
#
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.
# ==============================================================================
"""Weekly menu configuration."""

import logging
from pathlib import Path

import yaml
from pydantic import RootModel

from fitfood_planner.models import AdditionalFood

logger = logging.getLogger(__name__)

# Day name -> product ids, in serving order
DEFAULT_MENU: dict[str, list[int | str]] = {
    "Monday": [28, 39, 16, 24],
    "Tuesday": [28, 39, 16],
    "Wednesday": [28, 39, 16, 24],
    "Thursday": [28, 39, 16],
    "Friday": [28, 39, 16, 24],
}


class MenuConfig(RootModel[dict[str, list[int | str]]]):
    """A menu as read from YAML: day name mapped to a list of product ids."""


def load_menu(path: str | Path) -> dict[str, list[int | str]]:
    """Load a menu from a YAML file.

    The file holds a mapping of day name to a list of product ids, e.g.::

        Monday: [28, 39, 16]
        Tuesday: [28, 39]

    Args:
        path: YAML file path.

    Returns:
        The menu, keeping the file's day order.

    Raises:
        pydantic.ValidationError: If the file is not a mapping of lists of ids.
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    menu = MenuConfig.model_validate(data).root
    logger.info("Loaded menu for %d days from %s", len(menu), path)
    return menu


# Foods used to make up a calorie shortfall, per 100 g
ADDITIONAL_FOOD = [
    AdditionalFood(name="Chicken breast", grams=100, kcal=110, proteins=20),
    AdditionalFood(name="Whey protein", grams=100, kcal=388, proteins=80),
]
