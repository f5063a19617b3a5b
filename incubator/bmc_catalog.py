# incubator/bmc_catalog.py

from dataclasses import dataclass


@dataclass(frozen=True)
class BMCSection:
    key: str
    label: str
    fallback_question: str


GENERIC_FALLBACK_QUESTION = "أخبرني المزيد عن هذا الجانب من مشروعك."

# Order matters: session progress indexes into this tuple (mod len).
BMC_SECTIONS: tuple[BMCSection, ...] = (
    BMCSection(
        "Key Partners",
        "الشركاء الرئيسيون",
        "من هم الشركاء الرئيسيون الذين تحتاجهم لتنفيذ مشروعك؟",
    ),
    BMCSection(
        "Key Activities",
        "الأنشطة الرئيسية",
        "ما هي الأنشطة الرئيسية التي يجب القيام بها لتقديم قيمة للعملاء؟",
    ),
    BMCSection(
        "Value Propositions",
        "القيمة المقدمة",
        "ما هي القيمة المميزة التي يقدمها مشروعك للعملاء؟",
    ),
    BMCSection(
        "Customer Relationships",
        "علاقات العملاء",
        "كيف ستبني وتحافظ على علاقات مع عملائك؟",
    ),
    BMCSection(
        "Customer Segments",
        "شرائح العملاء",
        "من هم العملاء المستهدفون لمشروعك؟",
    ),
    BMCSection(
        "Key Resources",
        "الموارد الرئيسية",
        "ما هي الموارد الرئيسية التي تحتاجها لتشغيل المشروع؟",
    ),
    BMCSection(
        "Channels",
        "قنوات التوزيع",
        "كيف ستصل إلى عملائك وتقدم لهم خدماتك؟",
    ),
    BMCSection(
        "Cost Structure",
        "هيكل التكاليف",
        "ما هي التكاليف الرئيسية التي ستتحملها في مشروعك؟",
    ),
    BMCSection(
        "Revenue Streams",
        "تدفقات الإيرادات",
        "كيف ستحقق الإيرادات من مشروعك؟",
    ),
)

TOTAL_SECTIONS = len(BMC_SECTIONS)


def section_at(progress: int) -> BMCSection:
    return BMC_SECTIONS[progress % TOTAL_SECTIONS]


def section_by_key(key: str) -> BMCSection | None:
    for section in BMC_SECTIONS:
        if section.key == key:
            return section
    return None
