import asyncio

from loguru import logger
from telegram import Update
from telegram.ext import (
    Application,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from app.config import get_settings
from app.deps import chat_service
from app.errors import SavingsCoachError
from app.formatting import format_usd
from app.llm.prompts import WELCOME_MESSAGE
from app.models.schemas import ExpenseRecord

settings = get_settings()

MAX_LISTED_EXPENSES = 20


def telegram_user_id(update: Update) -> str:
    return f"tg:{update.effective_user.id}"


def _expense_summary(expenses: list[ExpenseRecord]) -> str:
    """Build a summary of recent expenses with the overall total."""
    if not expenses:
        return "No expenses tracked yet. Start chatting to add your first expense!"

    lines = ["*Recent expenses:*\n"]
    for i, e in enumerate(expenses[:MAX_LISTED_EXPENSES], 1):
        line = f"{i}. {e.date.isoformat()} — *{format_usd(e.amount)}* {e.category}"
        if e.description:
            line += f" ({e.description})"
        lines.append(line)
    if len(expenses) > MAX_LISTED_EXPENSES:
        lines.append(f"_…and {len(expenses) - MAX_LISTED_EXPENSES} more_")

    total = sum(e.amount for e in expenses)
    lines.append(f"\n*Total: {format_usd(total)}*")
    return "\n".join(lines)


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /start command."""
    await update.message.reply_text(
        f"{WELCOME_MESSAGE}\n\n"
        "Commands:\n"
        "/expenses — Show your tracked expenses\n"
        "/help — Show this message"
    )


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /help command."""
    await start_command(update, context)


async def expenses_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /expenses command."""
    expenses = await asyncio.to_thread(
        chat_service.repo.list_expenses, telegram_user_id(update)
    )
    await update.message.reply_text(_expense_summary(expenses), parse_mode="Markdown")


async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle incoming text messages through the chat pipeline."""
    user_text = update.message.text.strip()
    if not user_text:
        return
    user_id = telegram_user_id(update)
    logger.info("Telegram message from {}: {}", user_id, user_text)

    await update.message.chat.send_action("typing")

    try:
        result = await asyncio.to_thread(chat_service.handle, user_id, user_text)
    except SavingsCoachError as e:
        logger.error("Telegram message failed: {}", e.message)
        await update.message.reply_text("Failed to send message. Please try again.")
        return

    await update.message.reply_text(result.message)


def build_bot_app() -> Application:
    """Build and return the Telegram bot application."""
    app = Application.builder().token(settings.telegram_bot_token).build()

    app.add_handler(CommandHandler("start", start_command))
    app.add_handler(CommandHandler("help", help_command))
    app.add_handler(CommandHandler("expenses", expenses_command))
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, handle_message))

    return app
