from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup


def _rows(buttons: list[InlineKeyboardButton], width: int = 2) -> list[list[InlineKeyboardButton]]:
    return [buttons[i:i + width] for i in range(0, len(buttons), width)]


def options_keyboard(options: list[str]) -> InlineKeyboardMarkup:
    # callback_data вида "pick:INDEX" — текст варианта может не влезть в 64 байта
    buttons = [
        InlineKeyboardButton(text=text, callback_data=f"pick:{i}")
        for i, text in enumerate(options)
    ]
    return InlineKeyboardMarkup(inline_keyboard=_rows(buttons))


def modes_keyboard(modes: list[dict]) -> InlineKeyboardMarkup:
    buttons = []
    for m in modes:
        title = m.get("title") or m.get("slug")
        if m.get("icon"):
            title = f"{m['icon']} {title}"
        buttons.append(InlineKeyboardButton(text=title, callback_data=f"mode:{m.get('slug')}"))
    return InlineKeyboardMarkup(inline_keyboard=_rows(buttons, width=1))


def counts_keyboard(counts: list[int]) -> InlineKeyboardMarkup:
    buttons = [InlineKeyboardButton(text=str(n), callback_data=f"count:{n}") for n in counts]
    return InlineKeyboardMarkup(inline_keyboard=_rows(buttons, width=4))


def next_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text="السؤال التالي", callback_data="next")]
    ])


def restart_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text="تحدي جديد", callback_data="restart")]
    ])


def question_caption(q: dict) -> str:
    return (
        f"<b>{q['index'] + 1}/{q['total']}</b>  •  النقاط: <b>{q['score']}</b>\n"
        f"{q['prompt_text']}"
    )


def summary_text(summary: dict) -> str:
    return (
        "🏆 انتهى التحدي!\n"
        f"<b>{summary['score']}/{summary['total']}</b>\n"
        f"{summary['rank']}"
    )
