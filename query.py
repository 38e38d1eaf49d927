#!/usr/bin/env python3
"""Ad hoc runner for the Diabetic Meal Pipeline.

Run the pipeline directly without starting the API server.

Usage:
    python query.py --image images/cereal.jpg          # Analyze image, then recommend meals
    python query.py "oats, milk, salt"                  # Recommend meals for an ingredient list
    python query.py --details diabetic-fish-2           # Full details for one meal (id or name)
    python query.py --debug --image images/cereal.jpg   # Show full JSON responses

Features:
- Same pipeline stages as the HTTP service (vision → parser → recommendations → details)
- Rich tables for ingredients and meals
- Debug mode to display full JSON with all fields
"""

import asyncio
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from src.api.routes import analyze_image_bytes
from src.models.models import MealDetailsRequest
from src.pipeline.details import DetailGenerator
from src.pipeline.recommendations import RecommendationGenerator
from src.utils.logger import logger

console = Console()

USAGE = 'Usage: python query.py [--debug] [--image PATH | --details MEAL_ID | "ingredient, ingredient, ..."]'


def _print_json(title: str, model) -> None:
    console.print(f"[bold cyan]Debug Mode: {title}[/bold cyan]")
    console.print("[dim]" + "=" * 60 + "[/dim]")
    console.print_json(data=model.model_dump(mode="json", by_alias=True, exclude_none=True))
    console.print("[dim]" + "=" * 60 + "[/dim]")
    console.print()


def show_meals(meals, note=None) -> None:
    table = Table(title=f"{len(meals)} Diabetes-Friendly Meals")
    table.add_column("ID", style="dim")
    table.add_column("Meal", style="bold")
    table.add_column("Score", justify="right")
    table.add_column("Time")
    table.add_column("Difficulty")
    table.add_column("Servings", justify="right")
    for meal in meals:
        table.add_row(
            meal.id,
            meal.name,
            str(meal.suitability_score),
            meal.cooking_time,
            meal.difficulty,
            str(meal.servings),
        )
    console.print(table)
    if note:
        console.print(f"[yellow]{note}[/yellow]")


def show_details(details, note=None) -> None:
    console.print(f"[bold green]{details.name}[/bold green] [dim]({details.id})[/dim]")
    console.print(details.description)
    console.print(
        f"Servings: {details.servings} · Time: {details.cooking_time} · Difficulty: {details.difficulty}"
    )

    facts = details.nutritional_facts
    nutrition = Table(title="Nutrition (per serving)")
    for column in ("Calories", "Carbs (g)", "Protein (g)", "Fat (g)", "Fiber (g)", "Sugar (g)", "Sodium (mg)", "GI"):
        nutrition.add_column(column, justify="right")
    nutrition.add_row(
        *(
            str(value)
            for value in (
                facts.calories,
                facts.carbohydrates,
                facts.protein,
                facts.fat,
                facts.fiber,
                facts.sugar,
                facts.sodium,
                facts.glycemic_index,
            )
        )
    )
    console.print(nutrition)

    console.print("[bold]Ingredients[/bold]")
    for ingredient in details.ingredients:
        console.print(f"  • {ingredient}")

    console.print("[bold]Instructions[/bold]")
    for step in details.cooking_instructions:
        extras = ", ".join(part for part in (step.time, step.temperature) if part)
        console.print(f"  {step.step}. {step.instruction}" + (f" [dim]({extras})[/dim]" if extras else ""))

    console.print("[bold]Diabetic Tips[/bold]")
    for tip in details.diabetic_tips:
        console.print(f"  • {tip}")

    breakdown = details.plate_method_breakdown
    for label, section in (
        ("Vegetables", breakdown.vegetables),
        ("Protein", breakdown.protein),
        ("Carbohydrates", breakdown.carbohydrates),
    ):
        console.print(f"  {label} {section.percentage}%: {', '.join(section.items)}")

    if note:
        console.print(f"[yellow]{note}[/yellow]")


async def run_image(image_path: str, debug: bool = False) -> None:
    """Analyze an image, then recommend meals for the detected ingredients."""
    image_file = Path(image_path)
    if not image_file.exists():
        console.print(f"[red]✗ Error: Image file not found: {image_path}[/red]")
        sys.exit(1)

    image_bytes = image_file.read_bytes()
    logger.info(f"✓ Loaded image: {image_file.name} ({len(image_bytes) / 1024:.1f} KB)")

    analysis = await analyze_image_bytes(image_bytes)
    if debug:
        _print_json("Image Analysis", analysis)

    console.print(f"[bold]Ingredients[/bold] [dim](model: {analysis.model_used})[/dim]")
    console.print(", ".join(analysis.ingredients))
    console.print()

    await run_recommendations(analysis.ingredients, debug=debug)


async def run_recommendations(ingredients: list[str], debug: bool = False) -> None:
    result = await RecommendationGenerator().generate(ingredients)
    if debug:
        _print_json("Recommendations", result)
    show_meals(result.meals, result.note)


async def run_details(identifier: str, debug: bool = False) -> None:
    if identifier.startswith("diabetic-") or " " not in identifier:
        request = MealDetailsRequest(meal_id=identifier)
    else:
        request = MealDetailsRequest(meal_name=identifier)
    result = await DetailGenerator().generate(request)
    if debug:
        _print_json("Meal Details", result)
    show_details(result.meal_details, result.note)


def main(argv: list[str]) -> None:
    debug = False
    image_path = None
    details_id = None
    index = 0

    while index < len(argv) and argv[index].startswith("--"):
        flag = argv[index]
        if flag == "--debug":
            debug = True
            index += 1
        elif flag in ("--image", "--details"):
            if index + 1 >= len(argv):
                print(f"Error: {flag} flag requires a value")
                sys.exit(1)
            if flag == "--image":
                image_path = argv[index + 1]
            else:
                details_id = argv[index + 1]
            index += 2
        else:
            print(f"Unknown flag: {flag}")
            sys.exit(1)

    remaining = " ".join(argv[index:])

    try:
        if image_path:
            asyncio.run(run_image(image_path, debug=debug))
        elif details_id:
            asyncio.run(run_details(details_id, debug=debug))
        elif remaining:
            ingredients = [item.strip() for item in remaining.split(",") if item.strip()]
            asyncio.run(run_recommendations(ingredients, debug=debug))
        else:
            print(USAGE)
            sys.exit(1)
    except KeyboardInterrupt:
        logger.info("\nQuery interrupted by user.")
        sys.exit(0)


if __name__ == "__main__":
    main(sys.argv[1:])
