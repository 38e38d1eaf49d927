"""Prompts for the vision and chat stages of the meal pipeline.

Provides factory functions that build the instruction sent to vision providers
and the system/user message pairs sent to the chat-completion provider.
The chat prompts describe the exact JSON shape the coercion layer expects;
any drift between these prompts and src/models/models.py shows up as schema
failures (and fallback data) rather than errors.
"""


VISION_INSTRUCTION = (
    "You are reading the packaging of a food product. List every ingredient printed on the package. "
    "Return one ingredient per line, each line starting with '- '. "
    "Do not describe the image, the packaging or the brand; only list ingredients."
)

PLATE_METHOD_RULES = (
    "Build every meal with the diabetes plate method: "
    "50% non-starchy vegetables, 25% lean protein, 25% healthy (smart) carbohydrates."
)


def get_vision_instruction() -> str:
    """Instruction sent with the image to every vision provider.

    Hosted captioning models ignore it; instruction-following models answer
    with a dash-prefixed list that the structured-line parser reads directly.
    """
    return VISION_INSTRUCTION


def _get_recommendation_system_prompt(meal_count: int) -> str:
    return f"""You are a specialized nutritionist for Type 2 diabetes meal planning. Create diabetic-friendly meals.
{PLATE_METHOD_RULES}

Return EXACTLY {meal_count} meal recommendations as a JSON array. Each meal must include:
- id: unique identifier (string)
- name: meal name
- description: brief description (max 100 chars)
- plateMethod: object with vegetables[], protein[], carbohydrates[] arrays of strings
- suitabilityScore: number 1-10 (how good for diabetes)
- cookingTime: string like "30 minutes"
- difficulty: "Easy", "Medium", or "Hard"
- servings: number

Focus on low glycemic index foods, high fiber, lean proteins, and portion control.
Avoid processed foods, high sugar, and refined carbs."""


def get_recommendation_messages(ingredients: list[str], meal_count: int = 10) -> tuple[str, str]:
    """Build the (system, user) message pair for meal recommendations.

    Args:
        ingredients: Parsed ingredient list (may be empty).
        meal_count: Number of meals to request.

    Returns:
        Tuple of (system_message, user_message).
    """
    if ingredients:
        available = f"using these available ingredients: {', '.join(ingredients)}"
    else:
        available = "using common pantry ingredients"

    user_message = (
        f"Generate {meal_count} diabetic-friendly meal recommendations {available}. "
        "Return as valid JSON array only."
    )
    return _get_recommendation_system_prompt(meal_count), user_message


MEAL_DETAILS_SYSTEM_PROMPT = f"""You are a certified diabetes nutritionist. Provide detailed meal information for Type 2 diabetes patients.
{PLATE_METHOD_RULES}

Return a JSON object with:
- id: string
- name: string
- description: string
- servings: number
- cookingTime: string
- difficulty: string
- nutritionalFacts: {{calories, carbohydrates (g), protein (g), fat (g), fiber (g), sugar (g), sodium (mg), glycemicIndex}} as plain numbers
- ingredients: string array with quantities
- cookingInstructions: array of {{step, instruction, time?, temperature?}} with step numbers starting at 1
- diabeticTips: string array of diabetes-specific advice
- plateMethodBreakdown: {{vegetables: {{items, percentage}}, protein: {{items, percentage}}, carbohydrates: {{items, percentage}}}}

Focus on accurate nutritional data, clear cooking steps, and diabetes management tips."""


def get_meal_details_messages(meal_label: str) -> tuple[str, str]:
    """Build the (system, user) message pair for one meal's full details.

    Args:
        meal_label: Meal display name, or its identifier when no name is known.

    Returns:
        Tuple of (system_message, user_message).
    """
    user_message = (
        f'Provide complete meal details for: "{meal_label}". Include accurate nutritional facts, '
        "step-by-step cooking instructions, and diabetic-friendly tips. Return as valid JSON only."
    )
    return MEAL_DETAILS_SYSTEM_PROMPT, user_message
