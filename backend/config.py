from __future__ import annotations
from typing import Dict, Any, List

# Ordered list of game modes to show on the setup screen
MODES_ORDER: List[str] = [
    "FLAGS",
    "CAPITALS",
    "AREA",
]

# Metadata per mode (label/icon are shown as-is by the clients)
MODES_META: Dict[str, Dict[str, Any]] = {
    "FLAGS": {
        "title": "تخمين الأعلام",
        "icon": "🏳️",
    },
    "CAPITALS": {
        "title": "العواصم العالمية",
        "icon": "🏛️",
    },
    "AREA": {
        "title": "مقارنة المساحات",
        "icon": "🌍",
    },
}

# Question counts offered by the clients; the engine itself accepts any positive count
QUESTION_COUNTS: List[int] = [5, 10, 15, 20]

# Prompt templates
FLAG_PROMPT = "ما هي الدولة التي يمثلها هذا العلم؟"
CAPITAL_PROMPT = "ما هي عاصمة {name}؟"
AREA_PROMPT = "أي من هذه الدول تمتلك أكبر مساحة؟"

# Rank labels, from the top tier down
RANK_GENIUS = "عبقري الجغرافيا"
RANK_EXPERT = "خبير دولي"
RANK_EXPLORER = "مستكشف جيد"
RANK_BEGINNER = "مبتدئ"

# Fact provider texts
FACT_PROMPT = (
    "أعطني حقيقة واحدة غريبة أو مذهلة عن دولة {name} باللغة العربية. "
    "اجعل الإجابة قصيرة جداً (أقل من 20 كلمة)."
)
FACT_PENDING_TEXT = "معلومة مشوقة عن هذه الدولة قيد التحضير..."
FACT_FALLBACK_TEXT = "هل تعلم أن لكل دولة تاريخاً فريداً يميزها؟"
