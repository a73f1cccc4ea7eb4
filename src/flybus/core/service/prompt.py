"""Canned replies and the grounded generation prompt."""

import json
from collections.abc import Sequence

from flybus.configs.system import PromptConfig
from flybus.core.context.models import Language
from flybus.core.knowledge.models import KnowledgeItem

LANGUAGE_NAMES: dict[Language, str] = {
    Language.ENGLISH: "English",
    Language.ICELANDIC: "Icelandic",
}

GREETING_REPLIES: dict[Language, str] = {
    Language.ENGLISH: (
        "Hello! I'm your AI assistant at Reykjavík Excursions. I can help you "
        "with Flybus airport transfers, schedules, and bookings. What would "
        "you like to know? 😊"
    ),
    Language.ICELANDIC: (
        "Hæ! Ég er AI aðstoðarmaður hjá Reykjavík Excursions. Ég get hjálpað "
        "þér með Flybus flugvallaleið, tímatöflur og bókanir. Hvernig get ég "
        "aðstoðað? 😊"
    ),
}

ACKNOWLEDGMENT_REPLIES: dict[Language, str] = {
    Language.ENGLISH: "What else would you like to know about our tours?",
    Language.ICELANDIC: "Hvað annað viltu vita um ferðirnar okkar?",
}

UNKNOWN_REPLIES: dict[Language, str] = {
    Language.ENGLISH: (
        "I'm not sure about that. Please contact our service center at "
        "580 5400 or email info@icelandia.is for more information."
    ),
    Language.ICELANDIC: (
        "Ég er ekki viss um þetta. Vinsamlegast hafðu samband við þjónustuver "
        "í síma 580 5400 eða netfangið info@icelandia.is fyrir nánari "
        "upplýsingar."
    ),
}

APOLOGY_REPLIES: dict[Language, str] = {
    Language.ENGLISH: (
        "I apologize, but I'm having trouble processing your request right "
        "now. Please try again shortly."
    ),
    Language.ICELANDIC: (
        "Því miður get ég ekki afgreitt beiðnina þína núna. Vinsamlegast "
        "reyndu aftur innan skamms."
    ),
}

SYSTEM_INSTRUCTION_TEMPLATE = """You are a helpful assistant for the {service_name} service.
Respond in {language_name}.
Use only the information provided in the knowledge base.
Be friendly but professional, and stay focused on Flybus-related information.{terminology}"""  # noqa: E501

USER_CONTENT_TEMPLATE = """Knowledge Base Information: {knowledge}

User Question: {message}

Please provide a natural, conversational response using ONLY the information provided."""  # noqa: E501


def build_system_instruction(language: Language, config: PromptConfig) -> str:
    terminology = ""
    if config.terminology:
        preferred = "\n".join(
            f'- say "{preferred}" instead of "{term}"'
            for term, preferred in config.terminology.items()
        )
        terminology = f"\nPreferred terminology:\n{preferred}"
    return SYSTEM_INSTRUCTION_TEMPLATE.format(
        service_name=config.service_name,
        language_name=LANGUAGE_NAMES[language],
        terminology=terminology,
    )


def build_user_content(items: Sequence[KnowledgeItem], message: str) -> str:
    knowledge = json.dumps(
        [item.model_dump(mode="json") for item in items], ensure_ascii=False
    )
    return USER_CONTENT_TEMPLATE.format(knowledge=knowledge, message=message)
