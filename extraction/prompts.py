from storage.models import MemoryCategory


CATEGORY_LIST = ", ".join(c.value for c in MemoryCategory)

EXTRACT_PROMPT = (
    "You extract durable household facts for Judy, a family meal-planning assistant. "
    "Read the exchange below and list facts about the family that will still be true "
    "and useful in future conversations.\n\n"
    "Allowed categories: {categories}\n\n"
    "Return ONLY a JSON array of objects with the keys \"memory\" and \"category\":\n"
    '[{{"memory": "...", "category": "..."}}]\n'
    "If there is nothing worth remembering, return [].\n\n"
    "Do NOT extract:\n"
    "- generic cooking advice that is not about this family\n"
    "- questions the user asked without stating a fact\n"
    "- vague statements (\"we eat a lot\", \"things are busy\")\n\n"
    "Examples:\n"
    "User: My son Jake won't eat anything with mushrooms but he loves pizza.\n"
    '[{{"memory": "Jake dislikes mushrooms", "category": "dislike"}}, '
    '{{"memory": "Jake loves pizza", "category": "favorite"}}]\n\n'
    "User: We have soccer practice every Tuesday and Thursday so dinner needs to be fast.\n"
    '[{{"memory": "Soccer practice on Tuesdays and Thursdays; dinner must be quick", '
    '"category": "schedule"}}]\n\n'
    "User: What's a good substitute for buttermilk?\n"
    "[]\n\n"
    "Exchange:\n"
    "User: {user}\n"
    "Assistant: {assistant}"
)


def build_extraction_prompt(user_text: str, assistant_text: str) -> str:
    return EXTRACT_PROMPT.format(
        categories=CATEGORY_LIST,
        user=user_text,
        assistant=assistant_text,
    )
