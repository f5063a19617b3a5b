# incubator/fallbacks.py
"""
Pre-authored content served when the language model is unavailable or gives
up. Everything here is deterministic: same input, same text.
"""

from incubator.bmc_catalog import BMC_SECTIONS, GENERIC_FALLBACK_QUESTION, section_by_key


GENERAL_TOPIC = "general"

TOPIC_LABELS = {
    "logo design": "تصميم الشعار",
    "website design": "تصميم الموقع الإلكتروني",
    "visual identity": "الهوية البصرية",
    "cover design": "تصميم الأغلفة",
    "social media design": "تصميم منشورات السوشيال ميديا",
    "presentation design": "تصميم العروض التقديمية",
    GENERAL_TOPIC: "التصميم",
}

TOPIC_PRACTICES = {
    "logo design": [
        "اجعل الشعار بسيطاً وسهل التذكر.",
        "اختر لونين أو ثلاثة ألوان كحد أقصى تعبر عن شخصية مشروعك.",
        "تأكد أن الشعار واضح بالأبيض والأسود وبالأحجام الصغيرة.",
        "استخدم خطاً مقروءاً يناسب طبيعة نشاطك.",
        "جهّز نسخاً أفقية وعمودية وأيقونة مختصرة للشعار.",
    ],
    "website design": [
        "ابدأ بتحديد هدف الموقع الأساسي والصفحة الأهم للزائر.",
        "اجعل التصميم متجاوباً مع الجوال قبل سطح المكتب.",
        "استخدم تسلسلاً واضحاً للعناوين ودعوة واحدة بارزة لاتخاذ إجراء.",
        "حافظ على سرعة التحميل بضغط الصور وتقليل العناصر الثقيلة.",
        "ادعم الاتجاه من اليمين لليسار عند استهداف جمهور عربي.",
    ],
    "visual identity": [
        "حدد لوحة ألوان ثابتة ورموزها اللونية.",
        "اختر خطين كحد أقصى: واحد للعناوين وآخر للنصوص.",
        "اكتب دليلاً مختصراً لاستخدام الشعار والألوان.",
        "وحّد أسلوب الصور والأيقونات في كل المواد.",
    ],
    "cover design": [
        "اجعل العنوان مقروءاً من مسافة وبحجم صغير.",
        "استخدم صورة أو عنصراً رئيسياً واحداً يلخص المحتوى.",
        "راعِ المقاسات والهوامش المطلوبة للطباعة أو النشر الرقمي.",
        "حافظ على تباين قوي بين النص والخلفية.",
    ],
    "social media design": [
        "التزم بمقاسات كل منصة (مربع للمنشور وطولي للستوري).",
        "ضع الرسالة الأساسية في سطر واحد قصير.",
        "استخدم ألوان وخطوط هويتك في كل منشور.",
        "أضف دعوة واضحة لاتخاذ إجراء.",
        "جهّز قوالب ثابتة لتسريع النشر المنتظم.",
    ],
    "presentation design": [
        "فكرة واحدة لكل شريحة.",
        "استخدم نصاً قليلاً وخطاً كبيراً وواضحاً.",
        "اعرض الأرقام برسوم بيانية بسيطة.",
        "حافظ على قالب موحد للألوان والخطوط.",
        "اختم بشريحة تلخص المطلوب من الجمهور.",
    ],
    GENERAL_TOPIC: [
        "حدد جمهورك المستهدف قبل البدء بالتصميم.",
        "اعتمد البساطة ووضوح الرسالة.",
        "حافظ على اتساق الألوان والخطوط.",
        "اطلب آراء من مستخدمين حقيقيين وعدّل بناءً عليها.",
    ],
}

CLOSING_TIP = "🛠️ أدوات مجانية أو منخفضة التكلفة مقترحة: Canva، Figma، Adobe Express، Photopea، Google Fonts."

SUMMARY_HEADER = "📋 ملخص نموذج العمل التجاري لمشروعك:"
SUMMARY_MISSING_ANSWER = "لم تتم الإجابة بعد."


def bmc_fallback_question(section_key: str) -> str:
    section = section_by_key(section_key)
    if section is None:
        return GENERIC_FALLBACK_QUESTION
    return section.fallback_question


def design_fallback(topic: str) -> str:
    label = TOPIC_LABELS.get(topic, TOPIC_LABELS[GENERAL_TOPIC])
    practices = TOPIC_PRACTICES.get(topic, TOPIC_PRACTICES[GENERAL_TOPIC])[:6]

    lines = [f"🎨 نصائح في {label}:", ""]
    lines.extend(f"• {p}" for p in practices)
    lines.extend(["", CLOSING_TIP])
    return "\n".join(lines)


def summary_fallback(answers: dict[str, str]) -> str:
    lines = [SUMMARY_HEADER, ""]
    for section in BMC_SECTIONS:
        answer = (answers.get(section.key) or "").strip() or SUMMARY_MISSING_ANSWER
        lines.append(f"🔹 {section.label}: {answer}")
    return "\n".join(lines)
