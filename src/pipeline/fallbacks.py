"""Deterministic fallback data for every pipeline stage.

Each stage substitutes these constants when its provider output is missing or
unusable, so the response contract (non-empty, fully populated) always holds.
None of this data depends on the request.
"""

from typing import Optional

from src.models.models import MealRecommendation


# ============================================================================
# Vision stage
# ============================================================================

FALLBACK_VISION_MODEL = "Fallback"

FALLBACK_VISION_TEXT = (
    "Common food ingredients: flour, sugar, salt, water, oil, milk, eggs, butter, baking powder, "
    "vanilla extract, preservatives, artificial flavors, citric acid, sodium benzoate, vitamins, minerals"
)

# Returned by the HTTP layer when image analysis fails unexpectedly (not a provider failure)
DEMO_MODEL = "Demo Mode"
DEMO_RAW_RESPONSE = "API temporarily unavailable - showing sample ingredients for demonstration"
DEMO_INGREDIENTS = [
    "Enriched Wheat Flour",
    "Sugar",
    "Vegetable Oil",
    "Salt",
    "Baking Powder",
    "Natural Flavors",
    "Preservatives",
    "Vitamin C",
    "Iron",
    "Milk Powder",
]


# ============================================================================
# Ingredient parser
# ============================================================================

CANONICAL_INGREDIENTS = [
    "Wheat Flour",
    "Sugar",
    "Salt",
    "Water",
    "Vegetable Oil",
    "Milk",
    "Eggs",
    "Butter",
    "Baking Powder",
    "Vanilla Extract",
    "Preservatives",
    "Natural Flavors",
    "Citric Acid",
    "Sodium Benzoate",
    "Vitamin C",
]


# ============================================================================
# Recommendation stage
# ============================================================================

NOTE_RECOMMENDATIONS_FALLBACK = (
    "Using fallback recommendations - DeepSeek API not configured or unavailable"
)
NOTE_RECOMMENDATIONS_ERROR = "Using fallback recommendations due to API issues"

FALLBACK_MEALS = [
    {
        "id": "diabetic-salad-1",
        "name": "Mediterranean Diabetic Bowl",
        "description": "Fresh vegetables with lean protein and quinoa",
        "plateMethod": {
            "vegetables": ["Mixed greens", "Cherry tomatoes", "Cucumber", "Bell peppers"],
            "protein": ["Grilled chicken breast", "Chickpeas"],
            "carbohydrates": ["Quinoa", "Whole grain pita"],
        },
        "suitabilityScore": 9,
        "cookingTime": "25 minutes",
        "difficulty": "Easy",
        "servings": 2,
    },
    {
        "id": "diabetic-fish-2",
        "name": "Baked Salmon with Vegetables",
        "description": "Omega-3 rich salmon with roasted low-carb vegetables",
        "plateMethod": {
            "vegetables": ["Broccoli", "Asparagus", "Brussels sprouts"],
            "protein": ["Salmon fillet"],
            "carbohydrates": ["Sweet potato", "Brown rice"],
        },
        "suitabilityScore": 10,
        "cookingTime": "35 minutes",
        "difficulty": "Medium",
        "servings": 1,
    },
    {
        "id": "diabetic-chicken-3",
        "name": "Herb-Crusted Chicken Thighs",
        "description": "Juicy chicken with herb seasoning and steamed vegetables",
        "plateMethod": {
            "vegetables": ["Green beans", "Cauliflower", "Carrots"],
            "protein": ["Chicken thighs", "Tofu"],
            "carbohydrates": ["Wild rice", "Barley"],
        },
        "suitabilityScore": 8,
        "cookingTime": "40 minutes",
        "difficulty": "Medium",
        "servings": 3,
    },
    {
        "id": "diabetic-veggie-4",
        "name": "Lentil and Vegetable Curry",
        "description": "Plant-based protein with diabetes-friendly spices",
        "plateMethod": {
            "vegetables": ["Spinach", "Onions", "Tomatoes", "Peppers"],
            "protein": ["Red lentils", "Greek yogurt"],
            "carbohydrates": ["Brown rice", "Naan bread (small portion)"],
        },
        "suitabilityScore": 9,
        "cookingTime": "30 minutes",
        "difficulty": "Easy",
        "servings": 4,
    },
    {
        "id": "diabetic-beef-5",
        "name": "Lean Beef Stir-Fry",
        "description": "Quick stir-fry with colorful vegetables and lean beef",
        "plateMethod": {
            "vegetables": ["Bok choy", "Snow peas", "Mushrooms", "Red cabbage"],
            "protein": ["Lean beef strips"],
            "carbohydrates": ["Shirataki noodles", "Brown rice"],
        },
        "suitabilityScore": 8,
        "cookingTime": "20 minutes",
        "difficulty": "Easy",
        "servings": 2,
    },
    {
        "id": "diabetic-egg-6",
        "name": "Vegetable Frittata",
        "description": "Protein-rich eggs with fresh vegetables",
        "plateMethod": {
            "vegetables": ["Zucchini", "Bell peppers", "Onions", "Spinach"],
            "protein": ["Eggs", "Low-fat cheese"],
            "carbohydrates": ["Whole grain toast", "Sweet potato hash"],
        },
        "suitabilityScore": 9,
        "cookingTime": "25 minutes",
        "difficulty": "Easy",
        "servings": 4,
    },
    {
        "id": "diabetic-turkey-7",
        "name": "Turkey Meatball Zucchini Boats",
        "description": "Low-carb zucchini filled with lean turkey meatballs",
        "plateMethod": {
            "vegetables": ["Zucchini", "Tomatoes", "Basil", "Spinach"],
            "protein": ["Ground turkey", "Parmesan cheese"],
            "carbohydrates": ["Quinoa stuffing", "Whole grain breadcrumbs"],
        },
        "suitabilityScore": 9,
        "cookingTime": "45 minutes",
        "difficulty": "Medium",
        "servings": 3,
    },
    {
        "id": "diabetic-shrimp-8",
        "name": "Garlic Shrimp with Cauliflower Rice",
        "description": "Low-carb alternative with protein-rich shrimp",
        "plateMethod": {
            "vegetables": ["Cauliflower rice", "Asparagus", "Cherry tomatoes"],
            "protein": ["Shrimp", "Avocado"],
            "carbohydrates": ["Black beans", "Corn (small portion)"],
        },
        "suitabilityScore": 10,
        "cookingTime": "15 minutes",
        "difficulty": "Easy",
        "servings": 2,
    },
    {
        "id": "diabetic-pork-9",
        "name": "Pork Tenderloin with Roasted Vegetables",
        "description": "Lean pork with colorful roasted vegetables",
        "plateMethod": {
            "vegetables": ["Brussels sprouts", "Carrots", "Parsnips"],
            "protein": ["Pork tenderloin"],
            "carbohydrates": ["Roasted sweet potato", "Quinoa"],
        },
        "suitabilityScore": 8,
        "cookingTime": "50 minutes",
        "difficulty": "Medium",
        "servings": 3,
    },
    {
        "id": "diabetic-tofu-10",
        "name": "Asian Tofu Buddha Bowl",
        "description": "Plant-based protein bowl with Asian flavors",
        "plateMethod": {
            "vegetables": ["Edamame", "Cucumber", "Radishes", "Seaweed"],
            "protein": ["Firm tofu", "Hemp seeds"],
            "carbohydrates": ["Brown rice", "Miso soup"],
        },
        "suitabilityScore": 9,
        "cookingTime": "30 minutes",
        "difficulty": "Easy",
        "servings": 2,
    },
]


def get_fallback_meals() -> list[MealRecommendation]:
    """Return a fresh, validated copy of the 10-meal fallback catalog."""
    return [MealRecommendation.model_validate(meal) for meal in FALLBACK_MEALS]


def find_catalog_meal(meal_id: Optional[str] = None, meal_name: Optional[str] = None) -> Optional[dict]:
    """Look up a fallback-catalog meal by id, then by case-insensitive name."""
    for meal in FALLBACK_MEALS:
        if meal_id and meal["id"] == meal_id:
            return meal
    if meal_name:
        wanted = meal_name.strip().lower()
        for meal in FALLBACK_MEALS:
            if meal["name"].lower() == wanted:
                return meal
    return None


# ============================================================================
# Detail stage
# ============================================================================

NOTE_DETAILS_FALLBACK = "Using fallback details - DeepSeek API not configured or unavailable"
NOTE_DETAILS_ERROR = "Using fallback details due to API issues"

GENERIC_MEAL_NAME = "Healthy Diabetic Meal"
GENERIC_MEAL_DESCRIPTION = "Balanced meal following the diabetes plate method"

GENERIC_NUTRITIONAL_FACTS = {
    "calories": 450,
    "carbohydrates": 40,
    "protein": 30,
    "fat": 15,
    "fiber": 8,
    "sugar": 7,
    "sodium": 500,
    "glycemicIndex": 40,
}

GENERIC_INGREDIENTS = [
    "Mixed vegetables (2 cups)",
    "Lean protein (4 oz)",
    "Whole grain carbs (1/3 cup)",
    "Healthy fats (1 tbsp)",
    "Herbs and spices",
]

GENERIC_COOKING_INSTRUCTIONS = [
    {
        "step": 1,
        "instruction": "Preheat oven to 400°F (200°C). Prepare all ingredients.",
        "time": "5 minutes",
        "temperature": "400°F",
    },
    {"step": 2, "instruction": "Season protein with herbs and spices. Let marinate briefly.", "time": "5 minutes"},
    {"step": 3, "instruction": "Wash and chop all vegetables into uniform pieces.", "time": "8 minutes"},
    {"step": 4, "instruction": "Cook protein according to recipe (bake, grill, or pan-sear).", "time": "10-15 minutes"},
    {"step": 5, "instruction": "Steam or roast vegetables until tender but still crisp.", "time": "8-12 minutes"},
    {
        "step": 6,
        "instruction": "Prepare whole grain carbohydrate portion (rice, quinoa, etc.).",
        "time": "15 minutes",
    },
    {
        "step": 7,
        "instruction": "Plate using diabetes plate method: 50% vegetables, 25% protein, 25% carbs.",
        "time": "2 minutes",
    },
]

GENERIC_DIABETIC_TIPS = [
    "Monitor portion sizes using the plate method",
    "Eat slowly and chew thoroughly to help blood sugar control",
    "Check blood glucose 2 hours after eating",
    "Pair carbohydrates with protein or healthy fats",
    "Choose non-starchy vegetables to fill half your plate",
    "Opt for whole grains over refined carbohydrates",
    "Stay hydrated with water throughout the meal",
]

GENERIC_PLATE_BREAKDOWN = {
    "vegetables": {"items": ["Non-starchy vegetables", "Leafy greens", "Colorful vegetables"], "percentage": 50},
    "protein": {"items": ["Lean meat", "Fish", "Legumes", "Low-fat dairy"], "percentage": 25},
    "carbohydrates": {"items": ["Whole grains", "Starchy vegetables", "Legumes"], "percentage": 25},
}

# Pre-authored detail records keyed by fallback-catalog id. Missing fields come from the generic template.
MEAL_DETAIL_RECORDS = {
    "diabetic-salad-1": {
        "name": "Mediterranean Diabetic Bowl",
        "description": "Fresh vegetables with lean protein and quinoa - perfect for blood sugar control",
        "nutritionalFacts": {
            "calories": 485,
            "carbohydrates": 45,
            "protein": 32,
            "fat": 18,
            "fiber": 12,
            "sugar": 8,
            "sodium": 580,
            "glycemicIndex": 35,
        },
        "ingredients": [
            "2 cups mixed greens",
            "1 cup cherry tomatoes, halved",
            "1/2 cucumber, diced",
            "1/2 bell pepper, chopped",
            "4 oz grilled chicken breast",
            "1/3 cup cooked chickpeas",
            "1/3 cup cooked quinoa",
            "1 small whole grain pita",
            "2 tbsp olive oil",
            "1 tbsp lemon juice",
            "Fresh herbs (parsley, mint)",
        ],
    },
    "diabetic-fish-2": {
        "name": "Baked Salmon with Vegetables",
        "description": "Omega-3 rich salmon with roasted low-carb vegetables",
        "nutritionalFacts": {
            "calories": 420,
            "carbohydrates": 35,
            "protein": 35,
            "fat": 16,
            "fiber": 10,
            "sugar": 6,
            "sodium": 450,
            "glycemicIndex": 30,
        },
        "ingredients": [
            "5 oz salmon fillet",
            "1 cup broccoli florets",
            "6 asparagus spears",
            "1/2 cup Brussels sprouts",
            "1/2 medium sweet potato",
            "1/3 cup brown rice",
            "1 tbsp olive oil",
            "Lemon, herbs, spices",
        ],
    },
}
