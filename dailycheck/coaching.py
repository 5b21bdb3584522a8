"""Daily coaching mantras."""

from datetime import date

from pydantic import BaseModel, Field


class MantraDay(BaseModel):
    """Mantras for one day of the nine-day cycle."""

    day: int = Field(..., ge=1, le=9)
    theme: str
    pre: list[str]
    in_trade: list[str]
    post: list[str]

    model_config = {"frozen": True}


COACH_MANTRAS = [
    MantraDay(
        day=1,
        theme="Initiation / New Start",
        pre=[
            "Today I start fresh. I don't chase yesterday, I create today.",
            "Clarity first, entries second.",
            "My edge begins with patience.",
        ],
        in_trade=[
            "I follow my plan, not my impulses.",
            "Each click is a choice. I choose discipline.",
            "I don't need many trades, only the right ones.",
        ],
        post=[
            "I review, I learn, I grow stronger.",
            "Every trade teaches me, win or loss.",
            "I close the day clean, ready for tomorrow.",
        ],
    ),
    MantraDay(
        day=2,
        theme="Balance / Cooperation",
        pre=[
            "I trade with balance, not with force.",
            "Today I listen as much as I act.",
            "Calm mind, clear chart.",
        ],
        in_trade=[
            "I wait for confirmation, then act.",
            "Patience protects my account.",
            "Harmony over haste.",
        ],
        post=[
            "I note what worked, I note what didn't.",
            "I honor small wins as much as big ones.",
            "Balance today creates consistency tomorrow.",
        ],
    ),
    MantraDay(
        day=3,
        theme="Creativity / Expression",
        pre=[
            "I bring fresh eyes to the market.",
            "Creativity within rules is my power.",
            "My plan is my canvas, I paint with discipline.",
        ],
        in_trade=[
            "I trade with clarity, not chaos.",
            "Ideas come, but rules decide.",
            "I express discipline, not impulsiveness.",
        ],
        post=[
            "I record my story of today's trades.",
            "I turn mistakes into insights.",
            "I celebrate progress, not perfection.",
        ],
    ),
    MantraDay(
        day=4,
        theme="Structure / Discipline",
        pre=[
            "My structure is my safety.",
            "I respect my checklist before charts.",
            "Discipline is freedom in the market.",
        ],
        in_trade=[
            "I protect capital with clear stops.",
            "No setup, no trade.",
            "Rules guard my emotions.",
        ],
        post=[
            "I measure results against my plan, not my mood.",
            "I note discipline kept, or discipline lost.",
            "Consistency builds my trading future.",
        ],
    ),
    MantraDay(
        day=5,
        theme="Change / Adaptability",
        pre=[
            "I am ready for change but rooted in rules.",
            "Flexibility plus focus equals strength.",
            "Markets move, my discipline stays.",
        ],
        in_trade=[
            "I adapt without panic.",
            "Volatility is opportunity, not chaos.",
            "Every shift meets my stop and target.",
        ],
        post=[
            "I adjust, I don't chase.",
            "Change teaches me resilience.",
            "Flexibility today, growth tomorrow.",
        ],
    ),
    MantraDay(
        day=6,
        theme="Responsibility / Care",
        pre=[
            "I trade responsibly, one decision at a time.",
            "Care protects my capital.",
            "I choose quality over quantity.",
        ],
        in_trade=[
            "I protect risk before I seek reward.",
            "Every trade carries responsibility.",
            "My account is cared for by discipline.",
        ],
        post=[
            "I reflect on how well I protected risk.",
            "Responsibility builds mastery.",
            "Today's care compounds tomorrow's gains.",
        ],
    ),
    MantraDay(
        day=7,
        theme="Reflection / Analysis",
        pre=[
            "Preparation is my first trade.",
            "I analyze before I act.",
            "Depth of thought beats speed of action.",
        ],
        in_trade=[
            "I pause, I check, I confirm.",
            "One clear signal is better than many guesses.",
            "Calm analysis over impulse.",
        ],
        post=[
            "Reflection makes me sharper.",
            "I seek lessons, not excuses.",
            "Review today, refine tomorrow.",
        ],
    ),
    MantraDay(
        day=8,
        theme="Power / Achievement",
        pre=[
            "I control risk, not the market.",
            "Power is in discipline, not size.",
            "Today I aim for strong execution.",
        ],
        in_trade=[
            "I trade with control, not greed.",
            "Strength is saying NO to bad setups.",
            "One strong trade beats ten weak ones.",
        ],
        post=[
            "I respect profits, I respect losses.",
            "Power is progress, not perfection.",
            "Achievement is built day by day.",
        ],
    ),
    MantraDay(
        day=9,
        theme="Completion / Release",
        pre=[
            "I enter today to complete, not to force.",
            "I focus on closure, not on chasing.",
            "Today I trade with gratitude, not fear.",
        ],
        in_trade=[
            "I execute, I let go.",
            "I trust my stop and my target.",
            "I do not cling, I release outcomes.",
        ],
        post=[
            "I close the day, complete and clean.",
            "I release the result, I keep the lesson.",
            "I let go today, to start fresh tomorrow.",
        ],
    ),
]


def suggested_mantra(today: date) -> MantraDay:
    """Pick the mantra set for a date, rotating by day of month."""
    return COACH_MANTRAS[(today.day - 1) % len(COACH_MANTRAS)]
