# scripts/weather/weather_handler.py
"""
Telegram-оболочка погодного экрана.

Обработчики команд/сообщений переводят действия пользователя в вызовы
WeatherSession, а TelegramWeatherView рисует события сессии в чате:
карточка погоды: фото (иконка) с подписью и кнопкой °C/°F.
"""
import html
import logging
import os

from cachetools import LRUCache
from jinja2 import Template
from telegram import (
    Bot,
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    InputMediaPhoto,
    KeyboardButton,
    ReplyKeyboardMarkup,
    Update
)
from telegram.constants import ParseMode
from telegram.error import TelegramError
from telegram.ext import ContextTypes

from core.errors import LocationUnavailableError
from core.event_bus import subscribe_async, unsubscribe_async
from core.location import Coordinates
from core.models.display_state import DisplayState
from core.weather_session import EVENT_ERROR, EVENT_ICON, EVENT_LOADING, EVENT_UPDATED
from process_manager import process_manager

logger = logging.getLogger("weather_handler")

# Загружаем шаблон и заглушку иконки из файлов
IO_DIR = os.path.join(os.path.dirname(__file__), "_io")
TEMPLATE_PATH = os.path.join(IO_DIR, "templates", "weather_card.html.j2")
with open(TEMPLATE_PATH, "r", encoding="utf-8") as f:
    WEATHER_TEMPLATE = f.read()

PLACEHOLDER_PATH = os.path.join(IO_DIR, "assets", "default_weather_icon.png")
with open(PLACEHOLDER_PATH, "rb") as f:
    PLACEHOLDER_ICON = f.read()

UNIT_TOGGLE_CALLBACK = "unit_toggle"
DISMISS_CALLBACK = "dismiss_error"
LOCATION_BUTTON_TEXT = "📍 Current location"
LOADING_TEXT = "⏳ Loading weather..."
BUSY_TEXT = "⏳ Still loading, please wait."
START_TEXT = (
    "🌤️ <b>Weather</b>\n\n"
    "• Type a place name, or /weather &lt;place&gt;\n"
    "• /location or the button below: weather where you are\n"
    "• /units: switch °C / °F"
)


# === РЕНДЕРИНГ ===
def render_caption(state: DisplayState) -> str:
    template = Template(WEATHER_TEMPLATE, autoescape=True)
    return template.render(state=state)


def unit_keyboard(state: DisplayState) -> InlineKeyboardMarkup:
    target = state.unit.toggled()
    return InlineKeyboardMarkup([
        [InlineKeyboardButton(f"🌡 Show in {target.symbol}", callback_data=UNIT_TOGGLE_CALLBACK)]
    ])


def location_keyboard(one_time: bool = False) -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup(
        [[KeyboardButton(LOCATION_BUTTON_TEXT, request_location=True)]],
        resize_keyboard=True,
        one_time_keyboard=one_time,
        input_field_placeholder="Enter location"
    )


class TelegramWeatherView:
    """Подписчик событий сессий: отправляет и редактирует сообщения в чатах."""

    def __init__(self, bot: Bot, max_chats: int = 1000):
        self.bot = bot
        # chat_id → message_id текущей карточки / сообщения о загрузке
        self._cards: LRUCache = LRUCache(maxsize=max_chats)
        self._loading: LRUCache = LRUCache(maxsize=max_chats)

    def _handlers(self):
        return [
            (EVENT_LOADING, self.on_loading),
            (EVENT_UPDATED, self.on_updated),
            (EVENT_ICON, self.on_icon),
            (EVENT_ERROR, self.on_error)
        ]

    def register(self):
        for event_type, handler in self._handlers():
            subscribe_async(event_type, handler)

    def unregister(self):
        for event_type, handler in self._handlers():
            unsubscribe_async(event_type, handler)

    async def on_loading(self, event: dict):
        chat_id = event["chat_id"]
        if event["is_loading"]:
            message = await self.bot.send_message(chat_id=chat_id, text=LOADING_TEXT)
            self._loading[chat_id] = message.message_id
            return

        message_id = self._loading.pop(chat_id, None)
        if message_id is None:
            return
        try:
            await self.bot.delete_message(chat_id=chat_id, message_id=message_id)
        except TelegramError as e:
            logger.warning(f"⚠️ Не удалось удалить сообщение о загрузке в чате {chat_id}: {e}")

    async def on_updated(self, event: dict):
        chat_id = event["chat_id"]
        state: DisplayState = event["state"]
        caption = render_caption(state)

        if event.get("new_result") or chat_id not in self._cards:
            # Новая карточка всегда начинается с заглушки
            message = await self.bot.send_photo(
                chat_id=chat_id,
                photo=PLACEHOLDER_ICON,
                caption=caption,
                parse_mode=ParseMode.HTML,
                reply_markup=unit_keyboard(state)
            )
            self._cards[chat_id] = message.message_id
            return

        await self.bot.edit_message_caption(
            chat_id=chat_id,
            message_id=self._cards[chat_id],
            caption=caption,
            parse_mode=ParseMode.HTML,
            reply_markup=unit_keyboard(state)
        )

    async def on_icon(self, event: dict):
        chat_id = event["chat_id"]
        state: DisplayState = event["state"]
        message_id = self._cards.get(chat_id)
        if message_id is None or state.icon is None:
            return
        await self.bot.edit_message_media(
            chat_id=chat_id,
            message_id=message_id,
            media=InputMediaPhoto(
                media=state.icon,
                caption=render_caption(state),
                parse_mode=ParseMode.HTML
            ),
            reply_markup=unit_keyboard(state)
        )

    async def on_error(self, event: dict):
        await self.bot.send_message(
            chat_id=event["chat_id"],
            text=f"⚠️ <b>Error</b>\n{html.escape(event['message'])}",
            parse_mode=ParseMode.HTML,
            reply_markup=InlineKeyboardMarkup([
                [InlineKeyboardButton("OK", callback_data=DISMISS_CALLBACK)]
            ])
        )


# === ОБРАБОТЧИКИ КОМАНД ===
async def start(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Главный экран."""
    await context.bot.send_message(
        chat_id=update.effective_chat.id,
        text=START_TEXT,
        parse_mode=ParseMode.HTML,
        reply_markup=location_keyboard()
    )


async def _reply_busy(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await context.bot.send_message(chat_id=update.effective_chat.id, text=BUSY_TEXT)


async def weather_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """/weather <место>"""
    await _search(update, context, " ".join(context.args or []))


async def handle_search_text(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Любой текст вне команд считается поиском."""
    await _search(update, context, update.message.text)


async def _search(update: Update, context: ContextTypes.DEFAULT_TYPE, text: str):
    chat_id = update.effective_chat.id
    session = process_manager.get_session(chat_id)
    if session.is_loading:
        await _reply_busy(update, context)
        return
    logger.info(f"🔍 Чат {chat_id}: поиск '{text}'")
    await session.search(text)


async def location_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """/location: одноразовый запрос геопозиции."""
    chat_id = update.effective_chat.id
    session = process_manager.get_session(chat_id)
    if not session.request_location():
        await _reply_busy(update, context)
        return
    await context.bot.send_message(
        chat_id=chat_id,
        text="Tap the button to share your location:",
        reply_markup=location_keyboard(one_time=True)
    )


async def handle_location_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Геопозиция из сообщения. Правки live-локации сюда не попадают."""
    chat_id = update.effective_chat.id
    session = process_manager.get_session(chat_id)
    loc = update.message.location if update.message else None
    if loc is None:
        await session.location_failed("Координаты не получены")
        return

    try:
        coords = Coordinates.checked(loc.latitude, loc.longitude)
    except LocationUnavailableError as e:
        await session.location_failed(e.detail)
        return

    # В Telegram сама отправка геопозиции и есть запрос
    if not session.request_location():
        await _reply_busy(update, context)
        return
    logger.info(f"📍 Чат {chat_id}: получена геопозиция {coords.latitude}, {coords.longitude}")
    await session.use_location([coords])


async def units_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """/units: переключение °C/°F."""
    session = process_manager.get_session(update.effective_chat.id)
    toggled = await session.toggle_unit()
    if not toggled:
        await context.bot.send_message(
            chat_id=update.effective_chat.id,
            text=f"Units set to {session.state.unit.symbol}. Search for a place first."
        )


async def unit_toggle_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Кнопка °C/°F под карточкой."""
    query = update.callback_query
    session = process_manager.get_session(update.effective_chat.id)
    await session.toggle_unit()
    await query.answer(f"Showing {session.state.unit.symbol}")


async def dismiss_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Кнопка OK под сообщением об ошибке."""
    query = update.callback_query
    await query.answer()
    try:
        await query.message.delete()
    except TelegramError as e:
        logger.warning(f"⚠️ Не удалось закрыть уведомление: {e}")
