"""Focus-mode presets: rewrite prompt, answer prompt and engine selection.

Rewrite templates are rendered with ``chat_history`` and ``query``; answer
templates with ``systemInstructions``, ``context`` and ``date``. Both go
through ``str.format``, so literal braces must be doubled.
"""

from __future__ import annotations

from dataclasses import dataclass

_REWRITE_RULES = """
If the message is a greeting or a writing task rather than a question, return
`not_needed` inside the <question> tags.
If the user asks about a specific web page or document, put each URL on its
own line inside <links> tags and put the question inside <question> tags. If
the user only wants the page summarized, the question is `summarize`.
Always answer inside the <question> tags.

Examples:
1. Follow up question: Hi, how are you?
Rephrased question:
<question>
not_needed
</question>

2. Follow up question: What is in this article? https://example.com/report
Rephrased question:
<question>
summarize
</question>
<links>
https://example.com/report
</links>
"""

_REWRITE_TAIL = """
Conversation:
{chat_history}

Follow up question: {query}
Rephrased question:
"""

_ANSWER_RULES = """
Cite every statement with the number of the context entry it comes from,
written as [n], for example "Revenue grew 12% [3]." A sentence backed by
several entries may cite each of them [1][4]. Write in clear markdown with
headings where they help, and say so plainly when the context does not cover
the question instead of guessing.

### User instructions
{systemInstructions}

<context>
{context}
</context>

Current date: {date}
"""


def _rewrite(task: str, examples: str = "") -> str:
    intro = (
        "You will be given a conversation and a follow up question. Rephrase the "
        "follow up question so it is a standalone search query. " + task
    )
    return intro + "\n" + _REWRITE_RULES + examples + _REWRITE_TAIL


def _answer(role: str) -> str:
    return role + "\n" + _ANSWER_RULES


@dataclass(frozen=True)
class FocusPreset:
    name: str
    query_rewrite_prompt: str
    answer_prompt: str
    active_engines: tuple[str, ...] = ()
    search_enabled: bool = True
    rerank_enabled: bool = True
    rerank_threshold: float = 0.3


WEB = FocusPreset(
    name="web",
    query_rewrite_prompt=_rewrite("Keep it short and keyword oriented."),
    answer_prompt=_answer(
        "You are a research assistant answering questions from web search results. "
        "Give an informative, well organised answer based only on the context below."
    ),
)

NEWS = FocusPreset(
    name="news",
    query_rewrite_prompt=_rewrite(
        "The query is used to find financial news and market sentiment. Keep ticker "
        "symbols and company names and add terms such as news, analyst opinion or "
        "market reaction where they help.",
        """
3. Follow up question: Latest news on Tesla
Rephrased question:
<question>
TSLA Tesla latest news announcements market reaction
</question>
""",
    ),
    answer_prompt=_answer(
        "You are a financial news assistant. Report recent developments from the "
        "context with their dates and sources, lead with the most recent items and "
        "separate confirmed news from speculation. Do not give investment advice."
    ),
    active_engines=("bing news", "google news", "yahoo news", "reuters"),
)

SOCIAL = FocusPreset(
    name="social",
    query_rewrite_prompt=_rewrite(
        "The query is used to find what retail investors and communities are saying "
        "about a stock or topic. Add terms such as discussion, sentiment or reddit.",
        """
3. Follow up question: What do people think about NVDA?
Rephrased question:
<question>
NVDA Nvidia stock discussion sentiment reddit
</question>
""",
    ),
    answer_prompt=_answer(
        "You are a social sentiment analyst. Summarise the prevailing opinions in the "
        "context, note where they disagree and how strongly they are held. Treat "
        "posts as opinions, not facts."
    ),
    active_engines=("reddit", "lemmy posts", "mastodon users"),
    rerank_threshold=0.2,
)

FUNDAMENTALS = FocusPreset(
    name="fundamentals",
    query_rewrite_prompt=_rewrite(
        "The query is used to find company fundamentals. Keep ticker symbols and add "
        "terms such as earnings, revenue, balance sheet, valuation or 10-K.",
        """
3. Follow up question: How profitable is Microsoft?
Rephrased question:
<question>
MSFT Microsoft profit margin earnings revenue annual report
</question>
""",
    ),
    answer_prompt=_answer(
        "You are an equity research assistant. Present the company figures in the "
        "context with their reporting period, compare them across periods where the "
        "context allows and use tables for numbers. Do not give investment advice."
    ),
)

MACRO_ECONOMY = FocusPreset(
    name="macro_economy",
    query_rewrite_prompt=_rewrite(
        "The query is used to find macroeconomic data and policy news. Name the "
        "country or region and add indicator terms such as GDP, inflation, rates or "
        "central bank.",
        """
3. Follow up question: Is inflation coming down in Europe?
Rephrased question:
<question>
eurozone inflation CPI latest ECB interest rate outlook
</question>
""",
    ),
    answer_prompt=_answer(
        "You are a macroeconomics assistant. Explain the indicators and policy "
        "decisions in the context, give the latest values with their release dates "
        "and describe how they relate to each other."
    ),
)

FOCUS_MODES: dict[str, FocusPreset] = {
    p.name: p for p in (WEB, NEWS, SOCIAL, FUNDAMENTALS, MACRO_ECONOMY)
}


def get_focus_preset(name: str) -> FocusPreset:
    try:
        return FOCUS_MODES[name]
    except KeyError:
        known = ", ".join(sorted(FOCUS_MODES))
        raise ValueError(f"unknown focus mode {name!r} (expected one of: {known})") from None
