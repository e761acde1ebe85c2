# bot.py
# -*- coding: utf-8 -*-
"""
Основной скрипт бота: один экран погоды на чат.
"""
import logging
from telegram import Update
from telegram.ext import (
    Application,
    CommandHandler,
    MessageHandler,
    CallbackQueryHandler,
    filters,
    ContextTypes
)
from process_manager import process_manager
from core.utils.error_handler import log_exception

from scripts.weather.weather_handler import (
    DISMISS_CALLBACK,
    UNIT_TOGGLE_CALLBACK,
    TelegramWeatherView,
    dismiss_callback,
    handle_location_message,
    handle_search_text,
    location_command,
    start,
    unit_toggle_callback,
    units_command,
    weather_command
)

WEATHER_VIEW_KEY = "weather_view"


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE):
    update_id = update.update_id if isinstance(update, Update) else None
    log_exception(context.error, "⚠️ Исключение при обработке", context={"update_id": update_id})


async def on_post_init(application: Application):
    """Подписываем представление на события сессий."""
    view = TelegramWeatherView(application.bot)
    view.register()
    application.bot_data[WEATHER_VIEW_KEY] = view


async def on_post_shutdown(application: Application):
    view = application.bot_data.pop(WEATHER_VIEW_KEY, None)
    if view is not None:
        view.unregister()
    await process_manager.shutdown()


def register_handlers(app: Application):
    # === РЕГИСТРАЦИЯ ОБРАБОТЧИКОВ (ПОРЯДОК ВАЖЕН!) ===

    # 1. ОБРАБОТЧИКИ КОМАНД
    app.add_handler(CommandHandler("start", start))
    app.add_handler(CommandHandler("weather", weather_command))
    app.add_handler(CommandHandler("location", location_command))
    app.add_handler(CommandHandler("units", units_command))

    # 2. MESSAGE HANDLERS
    #    только новые сообщения: правки live-локации игнорируются (одноразовый фикс)
    app.add_handler(MessageHandler(filters.LOCATION & filters.UpdateType.MESSAGE, handle_location_message))
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND & filters.UpdateType.MESSAGE, handle_search_text))

    # 3. CALLBACK QUERY HANDLERS
    app.add_handler(CallbackQueryHandler(unit_toggle_callback, pattern=f"^{UNIT_TOGGLE_CALLBACK}$"))
    app.add_handler(CallbackQueryHandler(dismiss_callback, pattern=f"^{DISMISS_CALLBACK}$"))

    # 4. ОБРАБОТЧИК ОШИБОК
    app.add_error_handler(error_handler)


def build_application(token: str) -> Application:
    # concurrent_updates: запрос погоды одного чата не блокирует остальные
    app = (
        Application.builder()
        .token(token)
        .concurrent_updates(True)
        .post_init(on_post_init)
        .post_shutdown(on_post_shutdown)
        .build()
    )
    register_handlers(app)
    return app


# === Основная функция запуска ===
def main():
    process_manager.initialize_sync()
    logging.info("🚀 Запуск бота")
    missing = process_manager.config.missing_secrets()
    if missing:
        logging.critical(f"❌ Не заданы переменные окружения: {', '.join(missing)}")
        raise ValueError(f"{', '.join(missing)} не задан(ы) в .env!")

    app = build_application(process_manager.config.telegram_token)
    print("🚀 Бот запущен. Используйте /start.")
    print("Нажмите Ctrl+C для остановки.")

    try:
        app.run_polling(drop_pending_updates=True)
    except KeyboardInterrupt:
        print("\n🛑 Остановка по запросу пользователя.")
    finally:
        print("✅ Бот завершил работу.")


if __name__ == "__main__":
    main()
