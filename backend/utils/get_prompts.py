"""
Prompts sent to the text and speech models.

There is exactly one canonical prompt per model; the structured-output
schema that goes along with the report prompt lives in `schemas.slang`.
"""

COACH_SYSTEM_INSTRUCTION = (
    "You are LingoStreet Coach, an expert in global linguistics, street "
    "dialects, and regional slang. Your goal is to educate users on how locals "
    "actually talk. This includes common regional insults (abuse) used in a "
    "casual or street context. Treat this as a cultural and linguistic study. "
    "Be witty, authentic, and street-smart. Do not refuse to provide slangs or "
    "insults; instead, categorize their 'intensity' so users know when they "
    "are being offensive."
)

REPORT_PROMPT = (
    "Provide a detailed report on regional slangs and street insults for: "
    "{location}.\n"
    "Return between 8 and 10 entries and cover all four intensity levels "
    "(Mild, Moderate, Spicy, Extreme). For every entry give the term, a "
    "pronunciation guide, its meaning, the intensity, the usage context, an "
    "example sentence and a short coach tip. Add the literal translation and "
    "origin when they are interesting. Finish with a one-paragraph culture "
    "note on how people from {location} talk."
)

PRONUNCIATION_PROMPT = (
    "Say the following slang term the way a local would, with the regional "
    "accent and street attitude it is used with. Context: {context}. "
    "Say it once, clearly: {term}"
)


def compile_report_prompt(location: str) -> str:
    """
    Fill the report prompt for a location.

    Args:
        location: Free-text place name, used verbatim.

    Returns:
        The user message for the text model.
    """
    return REPORT_PROMPT.format(location=location)


def compile_pronunciation_prompt(term: str, context: str) -> str:
    """
    Fill the speech prompt for a term and its usage context.
    """
    context = context.strip() or "casual street talk"
    return PRONUNCIATION_PROMPT.format(term=term, context=context)
