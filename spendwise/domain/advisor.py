"""Pure functions for building AI assistant prompts.

No I/O here: the gemini integration sends whatever these functions build.
"""

from collections.abc import Sequence

from spendwise.domain.aggregation import get_total, non_zero_breakdown
from spendwise.domain.models import Expense

# Keeps prompts small enough to stay clear of free-tier rate limits
SUMMARY_LIMIT = 20

ADVISOR_PROMPT = """\
You are "SpendWise Advisor", a friendly and helpful AI financial assistant.
Your goal is to help the user understand their spending, save money, and make better financial decisions.

Current User Data (Recent Expenses):
{summary}

Instructions:
1. Answer the user's question based on the data above.
2. If the data is empty, give general financial advice.
3. Be concise, encouraging, and easy to understand.
4. Use emojis occasionally to be friendly.
5. If asked about "total" or specifics, calculate from the provided data.
"""

INSIGHTS_PROMPT = """\
You are "SpendWise Advisor", an AI financial assistant.
Analyse the user's spending below and reply with exactly three short, practical tips to spend less.
Number the tips and keep each under two sentences.

Total spent: {total}
Spending by category:
{breakdown}

Recent expenses:
{summary}
"""


def format_expense_line(expense: Expense) -> str:
    """Format one expense as `date: amount (category) - note`."""
    return f"{expense.date}: {expense.amount} ({expense.category.value}) - {expense.note or ''}"


def build_expense_summary(expenses: Sequence[Expense], limit: int = SUMMARY_LIMIT) -> str:
    """Serialize the most recent expenses, one per line.

    Args:
        expenses: Expenses, most recent first.
        limit: Maximum number of lines.

    Returns:
        Newline-joined summary (empty string for no expenses).
    """
    return "\n".join(format_expense_line(expense) for expense in expenses[:limit])


def build_advisor_prompt(message: str, expenses: Sequence[Expense], limit: int = SUMMARY_LIMIT) -> str:
    """Build the full chat prompt for a user question."""
    system_prompt = ADVISOR_PROMPT.format(summary=build_expense_summary(expenses, limit))
    return f"{system_prompt}\n\nUser Question: {message}"


def build_insights_prompt(expenses: Sequence[Expense], limit: int = SUMMARY_LIMIT) -> str:
    """Build the one-shot spending insights prompt."""
    breakdown = "\n".join(
        f"- {category.value}: {total}" for category, total in non_zero_breakdown(expenses).items()
    )
    return INSIGHTS_PROMPT.format(
        total=get_total(expenses),
        breakdown=breakdown or "- (no spending recorded)",
        summary=build_expense_summary(expenses, limit) or "(none)",
    )
