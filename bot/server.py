import asyncio
import logging

from aiogram import Bot, Dispatcher, F, types
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import CommandStart
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import StatesGroup, State

from fastapi import FastAPI, Request
from aiogram.types import Update

import httpx

from config import settings
from .api import api_get, api_post, wait_for_fact
from .keyboards import (
    counts_keyboard,
    modes_keyboard,
    next_keyboard,
    options_keyboard,
    question_caption,
    restart_keyboard,
    summary_text,
)

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


# ===== FSM состояния для хранения прогресса =====
class QuizState(StatesGroup):
    picking_mode = State()   # выбор режима
    picking_count = State()  # выбор количества вопросов
    active = State()         # в процессе квиза
    idle = State()           # конец

# В state будем хранить:
# {
#   "session_id": "...",
#   "mode": "FLAGS",
#   "last_question_id": 1,
#   "last_options": ["...", "...", "...", "..."]
# }

if not settings.BOT_TOKEN:
    raise RuntimeError("BOT_TOKEN is empty. Set it in .env")

dp = Dispatcher(storage=MemoryStorage())
bot = Bot(settings.BOT_TOKEN)


# ===== Экраны =====
async def show_modes(chat_id: int, state: FSMContext) -> None:
    try:
        payload = await api_get("/modules")
    except httpx.HTTPError as exc:
        logger.warning("Cannot load modes: %s", exc)
        await bot.send_message(chat_id, "الخادم غير متاح حالياً. حاول لاحقاً.")
        return
    await state.set_state(QuizState.picking_mode)
    await state.update_data(question_counts=payload.get("question_counts", []))
    await bot.send_message(chat_id, "🌍 عالم الدول\nاختر نوع التحدي:", reply_markup=modes_keyboard(payload.get("modes", [])))


async def show_question(chat_id: int, state: FSMContext) -> None:
    data = await state.get_data()
    q = await api_get(f"/quiz/question/{data['session_id']}")

    # сохраним данные для ответа
    await state.update_data(last_question_id=q["question_id"], last_options=q["options"])

    caption = question_caption(q)
    if q.get("image_url"):
        await bot.send_photo(chat_id, q["image_url"], caption=caption, parse_mode="HTML")
    else:
        await bot.send_message(chat_id, caption, parse_mode="HTML")
    await bot.send_message(chat_id, "اختر الإجابة:", reply_markup=options_keyboard(q["options"]))


async def show_summary(chat_id: int, state: FSMContext, session_id: str) -> None:
    summary = await api_get(f"/quiz/summary/{session_id}")
    await state.set_state(QuizState.idle)
    await bot.send_message(chat_id, summary_text(summary), reply_markup=restart_keyboard(), parse_mode="HTML")


async def reset_session(state: FSMContext) -> None:
    """Clear the chat state but keep the backend session for the next game."""
    data = await state.get_data()
    session_id = data.get("session_id")
    if session_id:
        try:
            await api_post(f"/quiz/reset/{session_id}")
        except httpx.HTTPError as exc:
            logger.warning("Reset failed: %s", exc)
            session_id = None
    await state.clear()
    if session_id:
        await state.update_data(session_id=session_id)


# ====== START ======
@dp.message(CommandStart())
async def start_cmd(m: types.Message, state: FSMContext):
    await reset_session(state)
    await show_modes(m.chat.id, state)


@dp.callback_query(F.data.startswith("mode:"))
async def choose_mode(cb: types.CallbackQuery, state: FSMContext):
    await cb.answer()
    mode = cb.data.split(":", 1)[1]
    data = await state.get_data()
    await state.set_state(QuizState.picking_count)
    await state.update_data(mode=mode)
    counts = data.get("question_counts") or [settings.N_QUESTIONS]
    await cb.message.answer("عدد الأسئلة:", reply_markup=counts_keyboard(counts))


@dp.callback_query(F.data.startswith("count:"))
async def choose_count(cb: types.CallbackQuery, state: FSMContext):
    await cb.answer()
    data = await state.get_data()
    try:
        n_questions = int(cb.data.split(":", 1)[1])
    except ValueError:
        await cb.message.answer("اختيار غير صالح.")
        return

    payload = {
        "user_id": str(cb.from_user.id),
        "n_questions": n_questions,
        "mode": data.get("mode", settings.DEFAULT_MODE),
        "session_id": data.get("session_id"),
    }
    try:
        try:
            started = await api_post("/quiz/start", payload)
        except httpx.HTTPStatusError as exc:
            # backend forgot the session (e.g. restarted): open a new one
            if exc.response.status_code != 404 or not payload["session_id"]:
                raise
            started = await api_post("/quiz/start", {**payload, "session_id": None})
    except httpx.HTTPError as exc:
        logger.warning("Cannot start quiz for %s: %s", cb.from_user.id, exc)
        await cb.message.answer("تعذر بدء التحدي. حاول لاحقاً.")
        return

    await state.set_state(QuizState.active)
    await state.update_data(session_id=started["session_id"])
    await cb.message.answer("🚀 ابدأ التحدي!")
    await show_question(cb.message.chat.id, state)


# ====== Выбор варианта ======
@dp.callback_query(F.data.startswith("pick:"))
async def pick_option(cb: types.CallbackQuery, state: FSMContext):
    await cb.answer()

    data = await state.get_data()
    if not data or "session_id" not in data:
        await cb.message.answer("لم يتم العثور على الجلسة، اضغط /start")
        return

    options = data.get("last_options") or []
    try:
        answer = options[int(cb.data.split(":", 1)[1])]
    except (ValueError, IndexError):
        await cb.message.answer("اختيار غير صالح.")
        return

    try:
        await cb.message.edit_reply_markup(reply_markup=None)
    except TelegramBadRequest:
        pass

    session_id = data["session_id"]
    ans = await api_post("/quiz/answer", {
        "session_id": session_id,
        "question_id": data["last_question_id"],
        "answer": answer,
    })
    if not ans["accepted"]:
        return

    if ans["correct"]:
        await cb.message.answer(f"✅ إجابة صحيحة! <b>{ans['correct_answer']}</b>", parse_mode="HTML")
        fact = await wait_for_fact(session_id)
        await cb.message.answer(f"💡 {fact}")
    else:
        await cb.message.answer(f"❌ إجابة خاطئة. الصحيح: <b>{ans['correct_answer']}</b>", parse_mode="HTML")

    await cb.message.answer("➡️", reply_markup=next_keyboard())


# Обработчик кнопки "Следующий вопрос"
@dp.callback_query(F.data == "next")
async def next_question(cb: types.CallbackQuery, state: FSMContext):
    await cb.answer()
    data = await state.get_data()
    if not data or "session_id" not in data:
        await cb.message.answer("لم يتم العثور على الجلسة، اضغط /start")
        return

    st = await api_post(f"/quiz/next/{data['session_id']}")
    if st["finished"]:
        await show_summary(cb.message.chat.id, state, data["session_id"])
        return
    await show_question(cb.message.chat.id, state)


# ====== Рестарт ======
@dp.callback_query(F.data == "restart")
async def restart(cb: types.CallbackQuery, state: FSMContext):
    await cb.answer()
    await reset_session(state)
    await show_modes(cb.message.chat.id, state)


app = FastAPI(title="Countries Quiz Bot Webhook")

@app.on_event("startup")
async def _on_startup():
    if settings.WEBHOOK_URL:
        await bot.set_webhook(settings.WEBHOOK_URL, drop_pending_updates=True)

@app.on_event("shutdown")
async def _on_shutdown():
    if settings.WEBHOOK_URL:
        await bot.delete_webhook(drop_pending_updates=True)
    await bot.session.close()

@app.get("/health")
async def health():
    return {"ok": True}

@app.post("/tg/webhook")
async def tg_webhook(request: Request):
    update = Update.model_validate(await request.json())
    await dp.feed_update(bot, update)
    return {"ok": True}


# ====== Точка входа ======
async def main():
    await dp.start_polling(bot)


if __name__ == "__main__":
    asyncio.run(main())
