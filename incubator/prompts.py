# incubator/prompts.py

import logging
import re

from incubator.bmc_catalog import BMCSection, BMC_SECTIONS
from incubator.fallbacks import TOPIC_LABELS, GENERAL_TOPIC

logger = logging.getLogger("incubator_backend")


ADVISOR_PERSONA = "أنت مستشار لمشاريع طلاب حاضنة أعمال 3win."

BMC_QUESTION_PROMPT = """{persona} قسم النموذج الحالي: "{section_label}". اكتب سؤالاً واحداً باللغة العربية لتوجيه الطالب في هذا القسم. يجب أن يكون السؤال واضحاً ومباشراً ويتعلق بـ {section_label}."""

DESIGN_ADVICE_PROMPT = """أنت مستشار تصميم لطلاب حاضنة أعمال 3win.
مجال السؤال: {topic_label}.
سؤال الطالب: "{message}"

أجب باللغة العربية بنصائح عملية ومختصرة في {topic_label}:
- قدّم من 3 إلى 6 نقاط قابلة للتطبيق.
- اقترح أدوات مجانية أو منخفضة التكلفة عند الحاجة.
- لا تكتب مقدمات طويلة."""

BMC_SUMMARY_PROMPT = """{persona} فيما يلي إجابات الطالب عن أقسام نموذج العمل التجاري (Business Model Canvas):

{answers}

اكتب باللغة العربية ملخصاً منظماً لنموذج العمل، مع عنوان لكل قسم، ثم ثلاث توصيات عملية لتحسين المشروع. إذا كان قسم بلا إجابة فاذكر ذلك باختصار."""


def unsafe_string_format(dest_string: str, **kwargs) -> str:
    """
    Replace only the {placeholders} present in kwargs; anything else is left
    untouched, so student text containing braces passes through unchanged.
    """
    missing_keys = []

    def replacer(match):
        key = match.group(1)
        if key in kwargs:
            return str(kwargs[key])
        missing_keys.append(key)
        return match.group(0)

    result = re.sub(r"\{(\w+)\}", replacer, dest_string)
    if missing_keys:
        logger.debug(f"Missing keys within string-to-format: {', '.join(missing_keys)}")
    return result


def bmc_question(section: BMCSection) -> str:
    return unsafe_string_format(
        BMC_QUESTION_PROMPT,
        persona=ADVISOR_PERSONA,
        section_label=section.label or section.key,
    )


def design_advice(topic: str, message: str) -> str:
    topic_label = TOPIC_LABELS.get(topic, TOPIC_LABELS[GENERAL_TOPIC])
    return unsafe_string_format(
        DESIGN_ADVICE_PROMPT,
        topic_label=topic_label,
        message=message.strip(),
    )


def bmc_summary(answers: dict[str, str]) -> str:
    lines = []
    for section in BMC_SECTIONS:
        answer = (answers.get(section.key) or "").strip() or "-"
        lines.append(f"- {section.label} ({section.key}): {answer}")
    return unsafe_string_format(
        BMC_SUMMARY_PROMPT,
        persona=ADVISOR_PERSONA,
        answers="\n".join(lines),
    )
